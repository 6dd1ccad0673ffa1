import io
import os
import sys
import json
import random
import pytest

# Add the repository root to path
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

import huffman_service as hs
from huffman_core import (
	EmptyAlphabetError,
	ReservedSymbolError,
	TruncatedStreamError,
	SPACE_PLACEHOLDER,
)


def _get_service():
	return hs.HuffmanService()


def test_service_initializes_logic_attribute():
	svc = _get_service()
	assert svc.logic is not None
	assert svc.logic.placeholder == SPACE_PLACEHOLDER


def test_compress_builds_session():
	svc = _get_service()
	session = svc.compress("abacabad")
	assert session.text == "abacabad"
	assert session.frequencies == {"a": 4, "b": 2, "c": 1, "d": 1}
	assert session.tree.freq == 8
	assert session.codes == {"a": "0", "b": "10", "c": "110", "d": "111"}
	assert session.encoded == "01001100100111"


def test_decompress_uses_retained_tree():
	svc = _get_service()
	session = svc.compress("hello world")
	assert svc.decompress(session.encoded, session.tree) == "hello world"


def test_compress_empty_short_circuits():
	svc = _get_service()
	session = svc.compress("")
	assert session.tree is None
	assert session.frequencies == {}
	assert session.codes == {}
	assert session.encoded == ""


def test_compress_empty_idempotent():
	svc = _get_service()
	assert svc.compress("") == svc.compress("")


def test_decompress_empty_without_tree():
	svc = _get_service()
	assert svc.decompress("", None) == ""


def test_decompress_bits_without_tree():
	svc = _get_service()
	with pytest.raises(EmptyAlphabetError):
		svc.decompress("0101", None)


def test_decompress_truncated():
	svc = _get_service()
	session = svc.compress("This is a test" * 10)
	with pytest.raises(TruncatedStreamError):
		# the last codeword is longer than one bit, so dropping a bit leaves it partial
		svc.decompress(session.encoded[:-1], session.tree)


def test_compress_rejects_placeholder_in_input():
	svc = _get_service()
	with pytest.raises(ReservedSymbolError):
		svc.compress(f"a{SPACE_PLACEHOLDER}b")


def test_custom_placeholder():
	svc = hs.HuffmanService("_")
	session = svc.compress("a b")
	assert "_" in session.codes
	assert svc.decompress(session.encoded, session.tree) == "a b"
	with pytest.raises(ReservedSymbolError):
		svc.compress("a_b")


def test_run_concrete_scenario():
	svc = _get_service()
	report = svc.run("abacabad")
	assert report.decoded == "abacabad"
	assert report.verified is True
	assert report.original_bits == 64
	assert report.encoded_bits == 14
	assert report.compression_ratio == pytest.approx(64 / 14)


def test_run_empty_input():
	svc = _get_service()
	report = svc.run("")
	assert report.verified is True
	assert report.decoded == ""
	assert report.encoded_bits == 0
	assert report.compression_ratio == 1.0


def test_run_single_symbol():
	svc = _get_service()
	report = svc.run("aaaa")
	assert report.codes == {"a": "0"}
	assert report.encoded == "0000"
	assert report.verified is True
	assert report.compression_ratio == 8.0


def test_run_whitespace():
	svc = _get_service()
	report = svc.run("a b")
	assert SPACE_PLACEHOLDER in report.codes
	assert " " not in report.codes
	assert report.decoded == "a b"


def test_run_random_inputs_verify():
	svc = _get_service()
	rng = random.Random(7)
	alphabet = "abc xyz 0123 .,!?-"
	for n in (1, 2, 3, 17, 256):
		text = "".join(rng.choice(alphabet) for _ in range(n))
		assert svc.run(text).verified


def test_report_to_dict_is_json_serializable():
	svc = _get_service()
	data = svc.run("a b").to_dict()
	encoded = json.loads(json.dumps(data))
	assert encoded["decoded"] == "a b"
	assert encoded["verified"] is True
	assert set(encoded) == {
		"text", "frequencies", "codes", "encoded", "decoded",
		"verified", "original_bits", "encoded_bits", "compression_ratio",
	}


@pytest.mark.parametrize("original,encoded_bits,expected", [
	(8, 14, 64 / 14),
	(4, 4, 8.0),
	(0, 0, 1.0),
])
def test_compression_ratio(original, encoded_bits, expected):
	assert hs.compression_ratio(original, encoded_bits) == pytest.approx(expected)


def test_pack_pads_last_byte():
	svc = _get_service()
	data, padding = svc.pack("01001100100111")
	assert data == bytes([0x4C, 0x9C])
	assert padding == 2
	assert svc.unpack(data, padding) == "01001100100111"


def test_pack_byte_aligned_has_no_padding():
	svc = _get_service()
	assert svc.pack("00000001") == (b"\x01", 0)
	assert svc.pack("") == (b"", 0)


def test_pack_stream_decodes_after_unpack():
	svc = _get_service()
	session = svc.compress("This is a test")
	data, padding = svc.pack(session.encoded)
	assert svc.decompress(svc.unpack(data, padding), session.tree) == "This is a test"


@pytest.mark.parametrize("data,padding", [(b"\x00", 8), (b"\x00", -1), (b"", 3)])
def test_unpack_rejects_bad_padding(data, padding):
	svc = _get_service()
	with pytest.raises(ValueError):
		svc.unpack(data, padding)


def test_cli_prints_report(capsys):
	assert hs.main(["abacabad"]) == 0
	out = json.loads(capsys.readouterr().out)
	assert out["encoded"] == "01001100100111"
	assert out["verified"] is True
	assert "packed" not in out


def test_cli_packed(capsys):
	assert hs.main(["abacabad", "--packed"]) == 0
	out = json.loads(capsys.readouterr().out)
	assert out["packed"] == {"hex": "4c9c", "padding": 2}


def test_cli_reads_stdin(monkeypatch, capsys):
	monkeypatch.setattr(sys, "stdin", io.StringIO("aaaa\n"))
	assert hs.main([]) == 0
	out = json.loads(capsys.readouterr().out)
	assert out["text"] == "aaaa"
	assert out["encoded"] == "0000"


def test_cli_reserved_symbol_exit_code(capsys):
	assert hs.main([f"a{SPACE_PLACEHOLDER}b"]) == 2
	assert "error" in capsys.readouterr().err


def test_cli_invalid_placeholder_exit_code(capsys):
	assert hs.main(["abc", "--placeholder", "xy"]) == 2
	assert "placeholder" in capsys.readouterr().err


def test_cli_strips_crlf_from_stdin(monkeypatch, capsys):
	monkeypatch.setattr(sys, "stdin", io.StringIO("abacabad\r\n"))
	assert hs.main([]) == 0
	out = json.loads(capsys.readouterr().out)
	assert out["text"] == "abacabad"
	assert "\r" not in out["codes"]


def test_cli_keeps_inner_line_endings(monkeypatch, capsys):
	monkeypatch.setattr(sys, "stdin", io.StringIO("a\nb\n\n"))
	assert hs.main([]) == 0
	assert json.loads(capsys.readouterr().out)["decoded"] == "a\nb\n"


def test_cli_undecodable_stdin_exit_code(monkeypatch, capsys):
	monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"ok \xff\xfe"), encoding="utf-8"))
	assert hs.main([]) == 2
	assert "error" in capsys.readouterr().err


def test_report_to_dict_copies_tables():
	svc = _get_service()
	report = svc.run("aab")
	data = report.to_dict()
	data["codes"]["z"] = "1"
	assert "z" not in report.codes
