"""
Tests for the oracle admin command line.
"""

import pytest
from eth_utils import to_checksum_address

import oracle_price_admin
from src.hedera.config import TOKENS
from src.hedera.errors import RemoteCallError
from src.oracle.oracle_contract import OracleContract
from src.test.helpers import FakeContract

NEW_OWNER = "0x00000000000000000000000000000000000a11ce"


@pytest.fixture
def fake():
    return FakeContract("0.0.6506125", {"owner": NEW_OWNER, "latestPrice": 6123000})


@pytest.fixture
def run(fake, monkeypatch):
    monkeypatch.delenv("ORACLE_CONTRACT_ID", raising=False)
    monkeypatch.setattr(oracle_price_admin, "load_dotenv", lambda: None)
    opened = []

    def factory(oracle_id):
        opened.append(oracle_id)
        return OracleContract(fake)

    def _run(*argv):
        return oracle_price_admin.main(list(argv), oracle_factory=factory)

    _run.opened = opened
    return _run


class TestHelp:

    @pytest.mark.parametrize("argv", [[], ["help"], ["-h"], ["--help"], ["set", "--help"]])
    def test_usage_exit_zero(self, run, capsys, argv):
        assert run(*argv) == 0
        assert "batch --pairs" in capsys.readouterr().out
        assert run.opened == []

    def test_unknown_command(self, run, capsys):
        assert run("frobnicate") == 1
        captured = capsys.readouterr()
        assert "Unknown command 'frobnicate'" in captured.err
        assert "usage:" in captured.out
        assert run.opened == []


class TestCommands:

    def test_owner(self, run, capsys):
        assert run("owner") == 0
        assert f"owner(0.0.6506125) = {NEW_OWNER}" in capsys.readouterr().out

    def test_oracle_override(self, run, capsys):
        assert run("owner", "--oracle", "0.0.42") == 0
        assert run.opened == ["0.0.42"]

    def test_oracle_from_env(self, run, monkeypatch):
        monkeypatch.setenv("ORACLE_CONTRACT_ID", "0.0.77")
        assert run("owner") == 0
        assert run.opened == ["0.0.77"]

    def test_invalid_oracle_id(self, run, capsys):
        assert run("owner", "--oracle", "oracle") == 1
        assert "Invalid contract id" in capsys.readouterr().err
        assert run.opened == []

    @pytest.mark.parametrize("cmd,flag", [("setOwner", "--to"), ("transferOwner", "--to"), ("transferOwner", "--new")])
    def test_transfer_owner(self, run, fake, capsys, cmd, flag):
        assert run(cmd, flag, NEW_OWNER) == 0
        assert fake.executions[0][:2] == ("transferOwnership", (to_checksum_address(NEW_OWNER),))
        out = capsys.readouterr().out
        assert "transferOwnership" in out and "SUCCESS" in out
        assert fake.called("owner") == [()]

    def test_transfer_owner_missing_to(self, run, fake, capsys):
        assert run("transferOwner") == 1
        assert "Missing --to" in capsys.readouterr().err
        assert fake.executions == []

    def test_transfer_owner_bad_address(self, run, fake):
        assert run("setOwner", "--to", "0x1234") == 1
        assert fake.executions == []

    def test_set_usd(self, run, fake, capsys):
        assert run("set", "--token", "sauce", "--usd", "0.06123") == 0
        assert fake.executions[0][:2] == ("updatePrice", (to_checksum_address(TOKENS["SAUCE"]), 6123000))
        assert "latestPrice -> 6123000 (0.06123000 USD)" in capsys.readouterr().out

    def test_set_price_raw(self, run, fake):
        addr = "0x" + "ab" * 20
        assert run("set", "--token", addr, "--priceRaw", "42") == 0
        assert fake.executions[0][1] == (to_checksum_address(addr), 42)

    def test_set_missing_price(self, run, fake, capsys):
        assert run("set", "--token", "SAUCE") == 1
        captured = capsys.readouterr()
        assert "Missing --token and either --usd or --priceRaw" in captured.err
        assert "usage:" in captured.out
        assert run.opened == []

    def test_set_malformed_usd(self, run, fake, capsys):
        assert run("set", "--token", "SAUCE", "--usd", "1.2.3") == 1
        assert "Invalid price '1.2.3'" in capsys.readouterr().err
        assert fake.executions == []

    def test_set_unknown_token(self, run, capsys):
        assert run("set", "--token", "XYZ", "--usd", "1") == 1
        assert "Unknown token 'XYZ'" in capsys.readouterr().err

    def test_batch(self, run, fake, capsys):
        assert run("batch", "--pairs", "SAUCE=0.061,HBAR=0.28") == 0
        name, (tokens, prices), _ = fake.executions[0]
        assert name == "updatePrices"
        assert prices == [6100000, 28000000]
        assert "updatePrices(batch size=2) -> SUCCESS" in capsys.readouterr().out

    @pytest.mark.parametrize("pairs", ["", "SAUCE", ",,"])
    def test_batch_bad_pairs(self, run, fake, pairs):
        assert run("batch", "--pairs", pairs) == 1
        assert fake.executions == []

    def test_reset(self, run, fake, capsys):
        assert run("reset") == 0
        assert fake.executions[0][0] == "resetPrices"
        assert "resetPrices() -> SUCCESS" in capsys.readouterr().out

    def test_info(self, run, capsys):
        assert run("info", "--token", "SAUCE") == 0
        assert f"latestPrice({TOKENS['SAUCE']}) = 6123000" in capsys.readouterr().out

    def test_info_non_hex_address(self, run, capsys):
        bad = "0x" + "z" * 40
        assert run("info", "--token", bad) == 1
        assert f"Unknown token '{bad}'" in capsys.readouterr().err
        assert run.opened == []

    def test_info_missing_token(self, run, capsys):
        assert run("info") == 1
        assert "Missing --token" in capsys.readouterr().err

    def test_remote_error_propagates(self, run, fake):
        fake.execute_errors["resetPrices"] = RemoteCallError("reverted", status="REVERTED")
        with pytest.raises(RemoteCallError):
            run("reset")


def test_missing_credentials_is_configuration_error(monkeypatch, capsys):
    for name in ("HEDERA_ACCOUNT_ID", "ACCOUNT_ID", "PRIVATE_KEY", "ECDSA_PRIVATE_KEY", "ORACLE_CONTRACT_ID"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(oracle_price_admin, "load_dotenv", lambda: None)
    assert oracle_price_admin.main(["owner"]) == 1
    assert "HEDERA_ACCOUNT_ID, ACCOUNT_ID" in capsys.readouterr().err
