from __future__ import annotations

import json
import os
import tempfile
import textwrap
import unittest
from pathlib import Path

from import_boundaries.config import load_config
from import_boundaries.scanner import check_file, check_paths, check_project, extract_imports, iter_source_files


SOURCE = textwrap.dedent(
    """\
    import React from 'react';
    import { a, b } from "./local";
    import type { Unit } from '@domain';
    import './styles.css';
    import * as ns from '../ns';
    import {
      multi,
    } from '@application/multi';
    export * from './reexport';
    export { c } from "../c";
    export type { T } from './types';
    const lazy = import('./lazy');
    const cjs = require("./cjs");
    import type from 'typed';
    """
)


class ExtractImportsTests(unittest.TestCase):
    def test_specifiers_in_order(self) -> None:
        refs = extract_imports(SOURCE)
        self.assertEqual(
            [r.spec for r in refs],
            [
                "react",
                "./local",
                "@domain",
                "./styles.css",
                "../ns",
                "@application/multi",
                "./reexport",
                "../c",
                "./types",
                "./lazy",
                "./cjs",
                "typed",
            ],
        )

    def test_type_only_flags(self) -> None:
        type_only = {r.spec for r in extract_imports(SOURCE) if r.type_only}
        self.assertEqual(type_only, {"@domain", "./types"})

    def test_lines_and_spans(self) -> None:
        refs = {r.spec: r for r in extract_imports(SOURCE)}
        self.assertEqual(refs["react"].line, 1)
        self.assertEqual(refs["@application/multi"].line, 8)
        self.assertEqual(refs["./cjs"].line, 13)
        ref = refs["./local"]
        self.assertEqual(SOURCE[ref.start : ref.end], "./local")


class CheckFilesTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory(prefix="boundaries-scan-")
        self.root = Path(os.path.realpath(self._tmp.name))
        self._write(
            "boundaries.json",
            json.dumps(
                {
                    "boundaries": [
                        {"dir": "domain", "alias": "@domain", "deny_imports_from": ["@application"]},
                        {"dir": "application", "alias": "@application", "allow_imports_from": ["@domain"]},
                    ],
                    "overrides": [{"files": ["**/*.test.ts"], "enforce_boundaries": False}],
                }
            ),
        )
        self.config = load_config(self.root / "boundaries.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, rel: str, text: str) -> Path:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    def test_check_file_reports_findings(self) -> None:
        p = self._write(
            "src/domain/entities/user.ts",
            "import { x } from '@application';\nimport { y } from '../events/bus';\nimport z from 'zod';\n",
        )
        findings = check_file(p, self.config)
        self.assertEqual([(f.line, f.violation.message_id) for f in findings], [(1, "boundaryViolation"), (2, "incorrectImportPath")])
        self.assertEqual(findings[0].file, "src/domain/entities/user.ts")
        self.assertEqual(findings[0].severity, "error")

    def test_override_skips_policy_for_test_files(self) -> None:
        p = self._write("src/domain/user.test.ts", "import { x } from '@application';\n")
        self.assertEqual(check_file(p, self.config), [])

    def test_iter_source_files_skips_excluded_dirs(self) -> None:
        self._write("src/domain/a.ts", "")
        self._write("src/domain/b.tsx", "")
        self._write("src/domain/readme.md", "")
        self._write("node_modules/pkg/index.js", "")
        self._write("dist/out.js", "")
        files = [p.relative_to(self.root).as_posix() for p in iter_source_files(self.config)]
        self.assertEqual(files, ["src/domain/a.ts", "src/domain/b.tsx"])

    def test_check_project_and_paths(self) -> None:
        self._write("src/application/ok.ts", "import { d } from '@domain';\n")
        bad = self._write("src/application/bad.ts", "import { d } from '@domain/entities';\n")

        files, findings = check_project(self.config)
        self.assertEqual(len(files), 2)
        self.assertEqual([f.file for f in findings], ["src/application/bad.ts"])

        self.assertEqual(len(check_paths([bad], self.config)), 1)
        self.assertEqual(len(check_paths([self.root / "src" / "application"], self.config)), 1)


if __name__ == "__main__":
    unittest.main()
