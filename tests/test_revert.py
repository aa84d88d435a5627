"""
Tests for revert reason recovery.

Tests cover:
- Input validation (hash format, supported networks, block numbers)
- Standard and Parity payload decoding
- Historical block checks (future blocks, archive window)
- Kovan provider capability probe
- Replay/decode failures
"""

from unittest.mock import MagicMock

import pytest

from ethrevert.config import Network
from ethrevert.errors import (
    ArchiveRequiredError,
    DecodeFailure,
    FutureBlockError,
    InvalidInputError,
    ProviderError,
    UnsupportedProviderError,
)
from ethrevert.revert import (
    ParityRevertStrategy,
    RevertReasonResolver,
    StandardRevertStrategy,
    decode_revert_reason,
    replay_params,
    strategy_for,
)

from .conftest import REPLAYED_TX, VALID_TX_HASH, parity_error_data, revert_payload

HEADER = "0x08c379a0" + "0" * 128


# =============================================================================
# Decoding
# =============================================================================


class TestStandardDecoding:
    def test_decodes_encoded_reason(self) -> None:
        assert decode_revert_reason(revert_payload("hello")) == "hello"

    def test_decodes_insufficient_balance(self) -> None:
        assert decode_revert_reason(revert_payload("Insufficient balance")) == "Insufficient balance"

    def test_trailing_zero_nibble_is_restored(self) -> None:
        # "p" is 0x70: stripping padding leaves an odd "7"
        assert decode_revert_reason(revert_payload("p")) == "p"

    def test_odd_length_hex_is_padded(self) -> None:
        assert decode_revert_reason(HEADER + "41424") == "AB@"

    def test_header_only_decodes_to_empty_string(self) -> None:
        assert decode_revert_reason(HEADER) == ""

    def test_unprefixed_code(self) -> None:
        assert decode_revert_reason(revert_payload("hello")[2:]) == "hello"

    def test_multibyte_utf8(self) -> None:
        assert decode_revert_reason(revert_payload("ünïcødé ✓")) == "ünïcødé ✓"


class TestParityDecoding:
    def test_decodes_encoded_reason(self) -> None:
        assert decode_revert_reason(revert_payload("hello"), Network.KOVAN) == "hello"

    def test_reads_exact_length(self) -> None:
        # Bytes past the declared length are not part of the reason
        code = revert_payload("abc")[: 138 + 6] + "ffff"
        assert decode_revert_reason(code, "kovan") == "abc"

    def test_keeps_trailing_null_inside_length(self) -> None:
        assert decode_revert_reason(revert_payload("a\x00"), Network.KOVAN) == "a\x00"

    def test_empty_code(self) -> None:
        assert decode_revert_reason("0x", Network.KOVAN) == ""

    def test_missing_length_word_raises(self) -> None:
        with pytest.raises(ValueError):
            decode_revert_reason("0x08c379a0", Network.KOVAN)


class TestStrategySelection:
    @pytest.mark.parametrize("network", ["mainnet", "goerli", "ropsten", "rinkeby"])
    def test_standard_networks(self, network: str) -> None:
        assert isinstance(strategy_for(network), StandardRevertStrategy)

    def test_kovan_uses_parity(self) -> None:
        strategy = strategy_for(Network.KOVAN)
        assert isinstance(strategy, ParityRevertStrategy)
        assert strategy.probe_before_replay is True


def test_replay_params_keeps_call_fields() -> None:
    params = replay_params(REPLAYED_TX)
    assert params == {
        "from": REPLAYED_TX["from"],
        "to": REPLAYED_TX["to"],
        "data": REPLAYED_TX["input"],
        "value": 0,
        "gas": 100_000,
    }


# =============================================================================
# Input validation
# =============================================================================


class TestInputValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tx_hash",
        [
            "0x" + "ab" * 31,  # too short
            "0x" + "ab" * 32 + "a",  # too long
            "ab" * 33,  # missing prefix
            "0x" + "zz" * 32,  # not hex
            "0x" + "ab" * 32 + "\n",  # trailing newline
            "",
        ],
    )
    async def test_rejects_malformed_hash(self, provider: MagicMock, tx_hash: str) -> None:
        factory = MagicMock(return_value=provider)
        resolver = RevertReasonResolver(provider_factory=factory)

        with pytest.raises(InvalidInputError):
            await resolver.resolve(tx_hash)

        factory.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("network", ["sepolia", "polygon", "", "main net"])
    async def test_rejects_unsupported_network(self, provider: MagicMock, network: str) -> None:
        factory = MagicMock(return_value=provider)
        resolver = RevertReasonResolver(provider_factory=factory)

        with pytest.raises(InvalidInputError):
            await resolver.resolve(VALID_TX_HASH, network)

        factory.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("network", ["mainnet", "goerli", "ropsten", "rinkeby", "MainNet"])
    async def test_accepts_supported_network(self, provider: MagicMock, network: str) -> None:
        provider.call.return_value = revert_payload("nope")
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, network) == "nope"

    @pytest.mark.asyncio
    async def test_rejects_malformed_block_number(self, provider: MagicMock) -> None:
        resolver = RevertReasonResolver(provider)

        with pytest.raises(InvalidInputError):
            await resolver.resolve(VALID_TX_HASH, "mainnet", "soon")

    @pytest.mark.asyncio
    async def test_default_provider_built_for_network(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("nope")
        factory = MagicMock(return_value=provider)
        resolver = RevertReasonResolver(provider_factory=factory)

        await resolver.resolve(VALID_TX_HASH, "GOERLI")

        factory.assert_called_once_with(Network.GOERLI)

    @pytest.mark.asyncio
    async def test_default_provider_reused_per_network(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("nope")
        factory = MagicMock(return_value=provider)
        resolver = RevertReasonResolver(provider_factory=factory)

        await resolver.resolve(VALID_TX_HASH, "ropsten")
        await resolver.resolve(VALID_TX_HASH, "ropsten")
        await resolver.resolve(VALID_TX_HASH, "goerli")

        assert [c.args for c in factory.call_args_list] == [(Network.ROPSTEN,), (Network.GOERLI,)]


# =============================================================================
# Replay
# =============================================================================


class TestReplay:
    @pytest.mark.asyncio
    async def test_replays_at_latest_by_default(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("Insufficient balance")
        resolver = RevertReasonResolver(provider)

        reason = await resolver.resolve(VALID_TX_HASH)

        assert reason == "Insufficient balance"
        provider.get_transaction.assert_awaited_once_with(VALID_TX_HASH)
        provider.call.assert_awaited_once_with(replay_params(REPLAYED_TX), "latest")
        provider.get_block_number.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replays_at_requested_block(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("late")
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "mainnet", "0x3de") == "late"

        provider.call.assert_awaited_once_with(replay_params(REPLAYED_TX), 990)
        provider.get_balance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_revert_data_from_rpc_error(self, provider: MagicMock) -> None:
        provider.call.side_effect = ProviderError(
            "execution reverted: Insufficient balance",
            rpc_code=3,
            data=revert_payload("Insufficient balance"),
        )
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH) == "Insufficient balance"

    @pytest.mark.asyncio
    async def test_rpc_error_without_revert_data_is_decode_failure(self, provider: MagicMock) -> None:
        cause = ProviderError("header not found", rpc_code=-32000)
        provider.call.side_effect = cause
        resolver = RevertReasonResolver(provider)

        with pytest.raises(DecodeFailure) as exc_info:
            await resolver.resolve(VALID_TX_HASH)

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.tx_hash == VALID_TX_HASH

    @pytest.mark.asyncio
    async def test_transaction_lookup_failure_is_decode_failure(self, provider: MagicMock) -> None:
        provider.get_transaction.side_effect = ProviderError("not found")
        resolver = RevertReasonResolver(provider)

        with pytest.raises(DecodeFailure):
            await resolver.resolve(VALID_TX_HASH)

    @pytest.mark.asyncio
    async def test_invalid_hex_is_decode_failure(self, provider: MagicMock) -> None:
        provider.call.return_value = HEADER + "zz"
        resolver = RevertReasonResolver(provider)

        with pytest.raises(DecodeFailure):
            await resolver.resolve(VALID_TX_HASH)

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_decode_failure(self, provider: MagicMock) -> None:
        provider.call.return_value = HEADER + "ff"
        resolver = RevertReasonResolver(provider)

        with pytest.raises(DecodeFailure):
            await resolver.resolve(VALID_TX_HASH)


# =============================================================================
# Historical blocks
# =============================================================================


class TestBlockValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("block", [1_000, 1_001, "2000"])
    async def test_future_block_fails_before_replay(self, provider: MagicMock, block) -> None:
        resolver = RevertReasonResolver(provider)

        with pytest.raises(FutureBlockError) as exc_info:
            await resolver.resolve(VALID_TX_HASH, "mainnet", block)

        assert exc_info.value.current_block == 1_000
        provider.get_transaction.assert_not_awaited()
        provider.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_block_at_window_edge_skips_canary(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("edge")
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "mainnet", 1_000 - 128) == "edge"
        provider.get_balance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_old_block_with_archive_node(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("old")
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "mainnet", 500) == "old"
        provider.get_balance.assert_awaited_once_with("0x0000000000000000000000000000000000000000", 500)

    @pytest.mark.asyncio
    async def test_old_block_without_archive_node(self, provider: MagicMock) -> None:
        provider.get_balance.side_effect = ProviderError(
            "project ID does not have access to archive state",
            rpc_code=-32002,
        )
        resolver = RevertReasonResolver(provider)

        with pytest.raises(ArchiveRequiredError) as exc_info:
            await resolver.resolve(VALID_TX_HASH, "mainnet", 500)

        assert exc_info.value.block_number == 500
        provider.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_canary_errors_do_not_fail(self, provider: MagicMock) -> None:
        provider.get_balance.side_effect = ProviderError("rate limited", rpc_code=-32005)
        provider.call.return_value = revert_payload("still decoded")
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "mainnet", 500) == "still decoded"


# =============================================================================
# Kovan (Parity)
# =============================================================================


class TestKovan:
    @pytest.mark.asyncio
    async def test_decodes_reason_from_rpc_error(self, provider: MagicMock) -> None:
        provider.call.side_effect = ProviderError(
            "VM execution error.",
            rpc_code=-32015,
            data=parity_error_data("Insufficient balance"),
        )
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "kovan") == "Insufficient balance"
        # Capability probe plus the real replay
        assert provider.call.await_count == 2

    @pytest.mark.asyncio
    async def test_plain_return_is_used_as_code(self, provider: MagicMock) -> None:
        provider.call.return_value = revert_payload("returned")
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "kovan") == "returned"

    @pytest.mark.asyncio
    async def test_provider_without_parity_data_is_unsupported(self, provider: MagicMock) -> None:
        provider.call.side_effect = ProviderError("method not found", rpc_code=-32601)
        resolver = RevertReasonResolver(provider)

        with pytest.raises(UnsupportedProviderError):
            await resolver.resolve(VALID_TX_HASH, "kovan")

        provider.get_block_number.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_block_within_window_needs_no_archive(self, provider: MagicMock) -> None:
        provider.call.side_effect = ProviderError("VM execution error.", data=parity_error_data("recent"))
        provider.get_balance.side_effect = ProviderError("archive", rpc_code=-32002)
        resolver = RevertReasonResolver(provider)

        assert await resolver.resolve(VALID_TX_HASH, "kovan", 950) == "recent"
        provider.get_balance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_block_outside_window_needs_archive(self, provider: MagicMock) -> None:
        provider.call.side_effect = ProviderError("VM execution error.", data=parity_error_data("old"))
        provider.get_balance.side_effect = ProviderError("archive", rpc_code=-32002)
        resolver = RevertReasonResolver(provider)

        with pytest.raises(ArchiveRequiredError):
            await resolver.resolve(VALID_TX_HASH, "kovan", 800)
