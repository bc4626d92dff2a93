import json

import pytest

from mcptools import fs
from mcptools.protocol import CallToolRequest, Params, ToolError


def run(name, **arguments):
    return fs.call(CallToolRequest(params=Params(name=name, arguments=arguments)))


def text_of(result):
    return result.content[0].text


def test_unknown_operation():
    result = run("delete_everything")
    assert result.is_error is True
    assert text_of(result) == "Unknown operation: delete_everything"


def test_read_file(tmp_path):
    target = tmp_path / "a.txt"
    target.write_bytes("hello\nworld".encode("utf-8"))
    result = run("read_file", path=str(target))
    assert result.is_error is None
    assert text_of(result) == "hello\nworld"
    assert result.content[0].mime_type == "text/plain"


def test_read_file_missing(tmp_path):
    result = run("read_file", path=str(tmp_path / "nope"))
    assert result.is_error is True
    assert text_of(result).startswith("Failed to read file: ")


def test_read_file_requires_string_path():
    result = run("read_file", path=5)
    assert result.is_error is True
    assert text_of(result) == "Please provide a path"


def test_read_multiple_files(tmp_path):
    good = tmp_path / "good.txt"
    good.write_bytes(b"data")
    missing = tmp_path / "missing.txt"
    result = run("read_multiple_files", paths=[str(good), 7, str(missing)])
    assert result.content[0].mime_type == "application/json"
    entries = json.loads(text_of(result))
    assert len(entries) == 2
    assert entries[0] == {"path": str(good), "content": "data", "error": None}
    assert entries[1]["path"] == str(missing)
    assert entries[1]["content"] is None
    assert entries[1]["error"]


def test_read_multiple_files_requires_array():
    result = run("read_multiple_files", paths="x")
    assert text_of(result) == "Please provide an array of paths"


def test_write_then_read_round_trip(tmp_path):
    target = tmp_path / "out.txt"
    written = run("write_file", path=str(target), content="line one\nline two")
    assert text_of(written) == "File written successfully"
    assert written.is_error is None
    assert text_of(run("read_file", path=str(target))) == "line one\nline two"


def test_write_file_missing_content(tmp_path):
    result = run("write_file", path=str(tmp_path / "x"))
    assert text_of(result) == "Please provide path and content"


def test_write_file_into_missing_dir(tmp_path):
    result = run("write_file", path=str(tmp_path / "no" / "x"), content="c")
    assert result.is_error is True
    assert text_of(result).startswith("Failed to write file: ")


def test_edit_file_truncates(tmp_path):
    target = tmp_path / "e.txt"
    target.write_bytes(b"a much longer original body")
    result = run("edit_file", path=str(target), content="short")
    assert text_of(result) == "File edited successfully"
    assert target.read_bytes() == b"short"


def test_edit_file_missing_raises(tmp_path):
    with pytest.raises(ToolError):
        run("edit_file", path=str(tmp_path / "absent"), content="c")
    assert not (tmp_path / "absent").exists()


def test_create_dir_nested_and_existing(tmp_path):
    nested = tmp_path / "a" / "b" / "c"
    first = run("create_dir", path=str(nested))
    assert text_of(first) == "Directory created successfully"
    assert nested.is_dir()
    again = run("create_dir", path=str(nested))
    assert again.is_error is None


def test_create_dir_over_file_fails(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    result = run("create_dir", path=str(blocker))
    assert result.is_error is True
    assert text_of(result).startswith("Failed to create directory: ")


def test_list_dir(tmp_path):
    (tmp_path / "f.txt").write_bytes(b"abc")
    (tmp_path / "sub").mkdir()
    result = run("list_dir", path=str(tmp_path))
    items = {item["name"]: item for item in json.loads(text_of(result))}
    assert set(items) == {"f.txt", "sub"}
    assert items["f.txt"]["is_file"] is True
    assert items["f.txt"]["is_dir"] is False
    assert items["f.txt"]["size"] == 3
    assert items["f.txt"]["path"] == str(tmp_path / "f.txt")
    assert items["sub"]["is_dir"] is True
    assert isinstance(items["sub"]["modified"], int)


def test_list_dir_missing(tmp_path):
    result = run("list_dir", path=str(tmp_path / "none"))
    assert text_of(result).startswith("Failed to list directory: ")


def test_move_file(tmp_path):
    source = tmp_path / "src.txt"
    source.write_bytes(b"payload")
    target = tmp_path / "dst.txt"
    result = fs.call(
        CallToolRequest(
            params=Params(name="move_file", arguments={"from": str(source), "to": str(target)})
        )
    )
    assert text_of(result) == "File moved successfully"
    assert not source.exists()
    assert target.read_bytes() == b"payload"


def test_move_file_requires_both_paths():
    result = run("move_file", to="x")
    assert text_of(result) == "Please provide from and to paths"


def test_search_files_recurses(tmp_path):
    (tmp_path / "notes.md").write_bytes(b"")
    (tmp_path / "other.txt").write_bytes(b"")
    deep = tmp_path / "x" / "y"
    deep.mkdir(parents=True)
    (deep / "more_notes.md").write_bytes(b"")
    result = run("search_files", directory=str(tmp_path), pattern="notes")
    found = json.loads(text_of(result))
    assert sorted(found) == sorted([str(tmp_path / "notes.md"), str(deep / "more_notes.md")])


def test_search_files_missing_directory(tmp_path):
    result = run("search_files", directory=str(tmp_path / "gone"), pattern="a")
    assert text_of(result).startswith("Failed to search files: ")


def test_get_file_info(tmp_path):
    target = tmp_path / "info.txt"
    target.write_bytes(b"12345")
    info = json.loads(text_of(run("get_file_info", path=str(target))))
    assert set(info) == {"size", "is_file", "is_dir", "modified", "created", "accessed"}
    assert info["size"] == 5
    assert info["is_file"] is True
    assert info["is_dir"] is False


def test_get_file_info_missing(tmp_path):
    result = run("get_file_info", path=str(tmp_path / "void"))
    assert text_of(result).startswith("Failed to get file info: ")


def test_describe_lists_all_tools():
    tools = fs.describe().tools
    assert [tool.name for tool in tools] == [
        "read_file",
        "read_multiple_files",
        "write_file",
        "edit_file",
        "create_dir",
        "list_dir",
        "move_file",
        "search_files",
        "get_file_info",
    ]
    by_name = {tool.name: tool for tool in tools}
    assert by_name["move_file"].input_schema["required"] == ["from", "to"]
    assert by_name["read_multiple_files"].input_schema["properties"]["paths"]["type"] == "array"