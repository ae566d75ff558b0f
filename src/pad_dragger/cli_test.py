import json

import pytest
from click.testing import CliRunner

from pad_dragger.cli import cli
from pad_dragger.utils import encode_hex


@pytest.fixture
def ciphertext_file(tmp_path, ciphertexts) -> str:
    path = tmp_path / "ciphertexts_to_decrypt.txt"
    path.write_text("\n".join(encode_hex(c) for c in ciphertexts) + "\n")
    return str(path)


def run(*args):
    return CliRunner().invoke(cli, list(args))


class TestCli:
    """Test suite for the command line interface"""

    def test_list(self, ciphertext_file):
        result = run("-c", ciphertext_file, "list")
        assert result.exit_code == 0, result.output
        assert "Loaded Ciphertexts" in result.output

    def test_list_json(self, ciphertext_file, ciphertexts):
        result = run("-c", ciphertext_file, "--json", "list")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [encode_hex(c) for c in ciphertexts]

    def test_pairs_json(self, ciphertext_file):
        result = run("-c", ciphertext_file, "--json", "pairs")
        assert result.exit_code == 0, result.output
        pairs = json.loads(result.stdout)
        assert [(p["index_i"], p["index_j"]) for p in pairs] == [(0, 1), (0, 2), (1, 2)]

    def test_pairs_with(self, ciphertext_file):
        result = run("-c", ciphertext_file, "--json", "pairs", "--with", "2")
        pairs = json.loads(result.stdout)
        assert [(p["index_i"], p["index_j"]) for p in pairs] == [(0, 2), (1, 2)]

    def test_inspect_json(self, ciphertext_file):
        result = run("-c", ciphertext_file, "--json", "inspect", "0", "1")
        assert result.exit_code == 0, result.output
        insights = json.loads(result.stdout)
        assert len(insights) == 15
        assert insights[0]["value_hex"] == f"{ord('H') ^ ord('G'):02X}"

    def test_inspect_table(self, ciphertext_file):
        result = run("-c", ciphertext_file, "inspect", "0", "1")
        assert result.exit_code == 0, result.output
        assert "Binary" in result.output

    def test_drag_json(self, ciphertext_file):
        result = run("-c", ciphertext_file, "--json", "drag", "HELLO")
        assert result.exit_code == 0, result.output
        results = json.loads(result.stdout)
        assert all(r["is_plausible"] for r in results)
        hit = results[0]
        assert (hit["index_i"], hit["index_j"], hit["offset"]) == (0, 1, 0)
        assert hit["fragment_text"] == "GOODB"
        assert hit["fragment_hex"] == encode_hex(b"GOODB")

    def test_drag_all(self, ciphertext_file):
        result = run("-c", ciphertext_file, "--json", "drag", "HELLO", "--all", "-t", "1.0")
        results = json.loads(result.stdout)
        assert len(results) == 33
        assert not any(r["is_plausible"] for r in results)

    def test_drag_hex_crib_first(self, ciphertext_file):
        result = run("-c", ciphertext_file, "--json", "drag", "--hex", encode_hex(b"HELLO"), "--first", "-w", "1")
        results = json.loads(result.stdout)
        assert len(results) == 1
        assert results[0]["fragment_text"] == "GOODB"

    def test_drag_table(self, ciphertext_file):
        result = run("-c", ciphertext_file, "drag", "HELLO")
        assert result.exit_code == 0, result.output
        assert "GOODB" in result.output

    def test_drag_crib_too_long(self, ciphertext_file):
        result = run("-c", ciphertext_file, "drag", "X" * 16)
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_decode_json(self, ciphertext_file, key):
        result = run("-c", ciphertext_file, "--json", "decode", "0", "0", "HELLO")
        assert result.exit_code == 0, result.output
        decoded = json.loads(result.stdout)
        assert decoded["key_span"]["key_hex"] == encode_hex(key[:5])
        assert [f["fragment_text"] for f in decoded["fragments"]] == ["HELLO", "GOODB", "SECRE"]

    def test_decode_bad_index(self, ciphertext_file):
        result = run("-c", ciphertext_file, "decode", "7", "0", "HELLO")
        assert result.exit_code == 1

    def test_guess_json(self, ciphertext_file, key):
        result = run("-c", ciphertext_file, "--json", "guess", "HELLO WORLD!!!!")
        assert result.exit_code == 0, result.output
        spans = json.loads(result.stdout)
        assert spans[0]["key_hex"] == encode_hex(key)

    def test_guess_wrong_length(self, ciphertext_file):
        result = run("-c", ciphertext_file, "guess", "HELLO")
        assert result.exit_code == 1
        assert "exactly 15" in result.output

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("4142\nnot hex\n")
        result = run("-c", str(path), "list")
        assert result.exit_code == 1
        assert "Line 2" in result.output

    def test_mismatched_lengths(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("4142\n414243\n")
        result = run("-c", str(path), "list")
        assert result.exit_code == 1
