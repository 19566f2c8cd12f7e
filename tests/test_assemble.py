"""Prompt assembly formatting tests."""

from __future__ import annotations

import re
import tempfile
import unittest
from pathlib import Path

from repoprompt import core


class AssemblePromptTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def write_file(self, rel_path: str, content: str) -> None:
        path = self.root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def test_fenced_blocks_use_extension_hint(self) -> None:
        self.write_file("src/app.ts", "export const a = 1;\n\n\n")
        self.write_file("Makefile", "all:\n\techo hi\n")
        text = core.assemble_prompt(["Makefile", "src/app.ts"], self.root)

        self.assertEqual(
            text,
            "## Files\n\n"
            "### Makefile\n\n"
            "```\n"
            "all:\n\techo hi\n"
            "```\n\n"
            "### src/app.ts\n\n"
            "```ts\n"
            "export const a = 1;\n"
            "```",
        )

    def test_xml_blocks_carry_path_and_no_fences(self) -> None:
        self.write_file("lib/util.py", "def f():\n    return 1\n")
        self.write_file("notes.md", "# Notes\n")
        text = core.assemble_prompt(["lib/util.py", "notes.md"], self.root, xml=True)

        self.assertNotIn("```", text)
        blocks = re.findall(r'<file path="([^"]+)">\n(.*?)\n</file>', text, re.S)
        self.assertEqual(
            blocks,
            [("lib/util.py", "def f():\n    return 1"), ("notes.md", "# Notes")],
        )

    def test_prompt_and_tree_come_first(self) -> None:
        self.write_file("a.py", "pass\n")
        tree = core.build_project_tree(["a.py"])
        text = core.assemble_prompt(["a.py"], self.root, prompt="Explain this.", tree=tree)

        self.assertTrue(
            text.startswith(
                "Explain this.\n\n"
                "## Project Structure\n\n"
                "```\n└── a.py\n```\n\n"
                "## Files\n\n"
                "### a.py\n\n"
            )
        )
        self.assertEqual(text, text.rstrip())

    def test_read_failure_is_fatal(self) -> None:
        (self.root / "bad.txt").write_bytes(b"\xff\xfe\x00bad")
        with self.assertRaises(core.FileReadError):
            core.assemble_prompt(["bad.txt"], self.root)
        with self.assertRaises(core.FileReadError):
            core.assemble_prompt(["gone.txt"], self.root)


if __name__ == "__main__":
    unittest.main()
