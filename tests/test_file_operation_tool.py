"""
Test cases for the file_operation tool.
"""

import pytest

from hacker_logic.server.tools.file_operation_tool import FileOperationToolHandler, MAX_LIST_ITEMS
from hacker_logic.server.security.security_manager import SecurityManager


class TestFileOperationTool:
    """Test cases for FileOperationToolHandler."""

    @pytest.fixture
    def handler(self, security_manager):
        return FileOperationToolHandler(security_manager)

    async def test_read_file(self, handler):
        result = await handler.execute({"operation": "read", "path": "hello.txt"})
        assert result.is_error is False
        assert result.text == "Content of hello.txt:\nHello, workspace!\n"

    async def test_read_missing_file(self, handler):
        result = await handler.execute({"operation": "read", "path": "missing.txt"})
        assert result.is_error is True
        assert result.text == "Error: Path not found: missing.txt"

    async def test_read_directory(self, handler):
        result = await handler.execute({"operation": "read", "path": "src"})
        assert result.text == "Error: Path is not a file"

    async def test_read_too_large(self, workspace):
        handler = FileOperationToolHandler(SecurityManager(workspace_root=str(workspace), max_file_size=4))
        result = await handler.execute({"operation": "read", "path": "hello.txt"})
        assert result.is_error is True
        assert result.text.startswith("Error: File too large:")

    async def test_write_file(self, handler, workspace):
        result = await handler.execute({"operation": "write", "path": "notes.txt", "content": "hi there"})
        assert result.is_error is False
        assert result.text == "Successfully wrote 8 bytes to notes.txt"
        assert (workspace / "notes.txt").read_text(encoding="utf-8") == "hi there"

    async def test_write_reports_utf8_bytes(self, handler):
        result = await handler.execute({"operation": "write", "path": "u.txt", "content": "é"})
        assert result.text == "Successfully wrote 2 bytes to u.txt"

    async def test_write_creates_parent_directories(self, handler, workspace):
        result = await handler.execute({"operation": "write", "path": "a/b/c.txt", "content": "x"})
        assert result.is_error is False
        assert (workspace / "a" / "b" / "c.txt").exists()

    async def test_write_requires_content(self, handler):
        result = await handler.execute({"operation": "write", "path": "empty.txt"})
        assert result.text == "Error: Content is required for write operation"

        result = await handler.execute({"operation": "write", "path": "empty.txt", "content": ""})
        assert result.text == "Error: Content is required for write operation"

    async def test_write_too_large(self, workspace):
        handler = FileOperationToolHandler(SecurityManager(workspace_root=str(workspace), max_file_size=3))
        result = await handler.execute({"operation": "write", "path": "big.txt", "content": "abcd"})
        assert result.text == "Error: Content too large: 4 bytes (max 3)"
        assert not (workspace / "big.txt").exists()

    async def test_list_directory(self, handler):
        result = await handler.execute({"operation": "list", "path": "."})
        assert result.is_error is False
        assert result.text == "Contents of . (3 items):\ndocs\nhello.txt\nsrc"

    async def test_list_empty_directory(self, handler):
        result = await handler.execute({"operation": "list", "path": "docs"})
        assert result.text == "Contents of docs (0 items):\n"

    async def test_list_file_is_not_directory(self, handler):
        result = await handler.execute({"operation": "list", "path": "hello.txt"})
        assert result.text == "Error: Path is not a directory"

    async def test_list_missing_directory(self, handler):
        result = await handler.execute({"operation": "list", "path": "nowhere"})
        assert result.text == "Error: Path not found: nowhere"

    async def test_list_truncated(self, handler, workspace):
        many = workspace / "many"
        many.mkdir()
        for i in range(MAX_LIST_ITEMS + 5):
            (many / f"f{i:05d}").touch()

        result = await handler.execute({"operation": "list", "path": "many"})
        lines = result.text.splitlines()
        assert lines[0] == f"Contents of many ({MAX_LIST_ITEMS + 5} items):"
        assert lines[-1] == "... (truncated)"
        assert len(lines) == MAX_LIST_ITEMS + 2

    async def test_traversal_rejected(self, handler):
        result = await handler.execute({"operation": "read", "path": "../etc/passwd"})
        assert result.is_error is True
        assert result.text == 'Error: Security violation: ".." not allowed in paths'

    async def test_absolute_path_outside(self, handler):
        result = await handler.execute({"operation": "read", "path": "/etc/passwd"})
        assert result.text == "Error: Access denied: Path is outside workspace boundary"

    async def test_operation_not_allowed(self, workspace):
        handler = FileOperationToolHandler(
            SecurityManager(workspace_root=str(workspace), allowed_operations=["read", "list"])
        )
        result = await handler.execute({"operation": "write", "path": "x.txt", "content": "x"})
        assert result.text == "Error: Invalid operation: write"

    async def test_unknown_operation(self, handler):
        result = await handler.execute({"operation": "delete", "path": "hello.txt"})
        assert result.is_error is True
        assert result.text.startswith("Error: Invalid arguments: operation")

    async def test_errors_do_not_leak_workspace_root(self, handler, workspace):
        (workspace / "locked").mkdir()
        result = await handler.execute({"operation": "write", "path": "locked", "content": "x"})
        assert result.is_error is True
        assert str(workspace) not in result.text
