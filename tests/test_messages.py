"""Tests for the effect message contract."""

import pytest

from effectport.errors import ProtocolError
from effectport.messages import (
    COMMAND_TYPES,
    REPLYING_COMMANDS,
    TERMINAL_COMMANDS,
    ExitFailureRequest,
    ExitSuccessRequest,
    PrintRequest,
    ReadFileRequest,
    ReadFileResult,
    WriteFileRequest,
    WriteFileResult,
    is_terminal,
    parse_effect_request,
    parse_effect_result,
)


class TestParseEffectRequest:
    """Test parsing outbound wire messages."""

    def test_read_file(self):
        request = parse_effect_request({"commandType": "readFile", "args": {"filename": "a.txt"}})

        assert request == ReadFileRequest(filename="a.txt")

    def test_write_file(self):
        request = parse_effect_request(
            {"commandType": "writeFile", "args": {"filename": "b.txt", "text": "world"}}
        )

        assert request == WriteFileRequest(filename="b.txt", text="world")

    @pytest.mark.parametrize(
        ("command_type", "expected_type"),
        [
            ("print", PrintRequest),
            ("exitSuccess", ExitSuccessRequest),
            ("exitFailure", ExitFailureRequest),
        ],
    )
    def test_message_commands(self, command_type, expected_type):
        request = parse_effect_request({"commandType": command_type, "args": {"message": "hi"}})

        assert isinstance(request, expected_type)
        assert request.message == "hi"
        assert request.command_type == command_type

    def test_extra_args_are_ignored(self):
        request = parse_effect_request(
            {"commandType": "readFile", "args": {"filename": "a.txt", "encoding": "latin-1"}}
        )

        assert request == ReadFileRequest(filename="a.txt")

    def test_unknown_command_type_rejected(self):
        with pytest.raises(ProtocolError, match="Unknown commandType: 'deleteFile'"):
            parse_effect_request({"commandType": "deleteFile", "args": {"filename": "a.txt"}})

    def test_missing_command_type_rejected(self):
        with pytest.raises(ProtocolError, match="Unknown commandType"):
            parse_effect_request({"args": {}})

    def test_non_object_message_rejected(self):
        with pytest.raises(ProtocolError, match="expected object"):
            parse_effect_request("readFile")

    def test_non_object_args_rejected(self):
        with pytest.raises(ProtocolError, match="must be an object"):
            parse_effect_request({"commandType": "print", "args": ["hi"]})

    def test_missing_required_arg_rejected(self):
        with pytest.raises(ProtocolError, match="args.text"):
            parse_effect_request({"commandType": "writeFile", "args": {"filename": "b.txt"}})

    def test_non_string_arg_rejected(self):
        with pytest.raises(ProtocolError, match="args.message"):
            parse_effect_request({"commandType": "print", "args": {"message": 42}})


class TestWireShape:
    """Test serialization back to wire dicts."""

    def test_read_file_result_echoes_command_type(self):
        result = ReadFileResult(text="hello", filename="a.txt")

        assert result.to_dict() == {
            "commandType": "readFile",
            "args": {"text": "hello", "filename": "a.txt"},
        }

    def test_write_file_result_has_empty_args(self):
        assert WriteFileResult().to_dict() == {"commandType": "writeFile", "args": {}}

    def test_request_to_dict_parses_back(self):
        request = WriteFileRequest(filename="b.txt", text="line1\r\nline2")

        assert parse_effect_request(request.to_dict()) == request


class TestParseEffectResult:
    """Test the core-side result parser."""

    def test_read_file_result(self):
        result = parse_effect_result(
            {"commandType": "readFile", "args": {"text": "hello", "filename": "a.txt"}}
        )

        assert result == ReadFileResult(text="hello", filename="a.txt")

    def test_write_file_result(self):
        assert parse_effect_result({"commandType": "writeFile", "args": {}}) == WriteFileResult()

    def test_terminal_commands_have_no_result(self):
        with pytest.raises(ProtocolError, match="No result defined"):
            parse_effect_result({"commandType": "exitSuccess", "args": {}})


class TestCommandSets:
    """Test command classification."""

    def test_vocabulary_is_closed(self):
        assert set(COMMAND_TYPES) == {"readFile", "writeFile", "print", "exitSuccess", "exitFailure"}

    def test_terminal_and_replying_are_disjoint(self):
        assert not TERMINAL_COMMANDS & REPLYING_COMMANDS
        assert "print" not in TERMINAL_COMMANDS | REPLYING_COMMANDS

    def test_is_terminal(self):
        assert is_terminal(ExitFailureRequest(message="x"))
        assert is_terminal(ExitSuccessRequest(message="x"))
        assert not is_terminal(PrintRequest(message="x"))
        assert not is_terminal(ReadFileRequest(filename="a.txt"))
