import pytest

from errors import EmptyMnemonic, EntropyUnavailable, InvalidAddress, InvalidMnemonic, InvalidPrivateKey
import wallet_service
from wallet_service import (
    create_identity,
    is_valid_mnemonic_input,
    is_valid_private_key_input,
    mask_address,
    normalize_address,
    recover_from_mnemonic,
    recover_from_private_key,
)
from tests.conftest import (
    HARDHAT_ADDRESS,
    HARDHAT_MNEMONIC,
    HARDHAT_PRIVATE_KEY,
    SAMPLE_ADDRESS,
    SAMPLE_PRIVATE_KEY,
)


class TestRecoverFromPrivateKey:
    def test_known_key(self):
        identity = recover_from_private_key(SAMPLE_PRIVATE_KEY)
        assert identity.address == SAMPLE_ADDRESS
        assert identity.private_key == SAMPLE_PRIVATE_KEY
        assert identity.mnemonic is None
        assert not identity.has_mnemonic()

    def test_prefix_is_optional(self):
        bare = SAMPLE_PRIVATE_KEY[2:]
        assert recover_from_private_key(bare) == recover_from_private_key("0x" + bare)

    def test_surrounding_whitespace_and_upper_case(self):
        identity = recover_from_private_key("  0X" + SAMPLE_PRIVATE_KEY[2:].upper() + "\n")
        assert identity.address == SAMPLE_ADDRESS
        assert identity.private_key == SAMPLE_PRIVATE_KEY

    @pytest.mark.parametrize("value", ["", "   ", "0x", "0x1234", "zz" * 32, "0x" + "00" * 32, "0x" + "ff" * 32])
    def test_invalid_input(self, value):
        with pytest.raises(InvalidPrivateKey):
            recover_from_private_key(value)

    def test_error_does_not_echo_input(self):
        secret = "0x" + "ab" * 31 + "zz"
        with pytest.raises(InvalidPrivateKey) as exc_info:
            recover_from_private_key(secret)
        assert "ab" * 31 not in str(exc_info.value)

    def test_repr_hides_private_key(self):
        identity = recover_from_private_key(SAMPLE_PRIVATE_KEY)
        assert SAMPLE_PRIVATE_KEY[2:] not in repr(identity)


class TestRecoverFromMnemonic:
    def test_hardhat_vector(self):
        identity = recover_from_mnemonic(HARDHAT_MNEMONIC)
        assert identity.address == HARDHAT_ADDRESS
        assert identity.private_key == HARDHAT_PRIVATE_KEY
        assert identity.mnemonic == HARDHAT_MNEMONIC

    def test_whitespace_is_collapsed(self):
        messy = "  " + "\t ".join(HARDHAT_MNEMONIC.split()) + " \n"
        identity = recover_from_mnemonic(messy)
        assert identity.mnemonic == HARDHAT_MNEMONIC
        assert identity.address == HARDHAT_ADDRESS

    def test_repeated_recovery_is_identical(self):
        first = recover_from_mnemonic(HARDHAT_MNEMONIC)
        second = recover_from_mnemonic(HARDHAT_MNEMONIC)
        assert first == second

    @pytest.mark.parametrize("value", ["", "   \n\t "])
    def test_empty(self, value):
        with pytest.raises(EmptyMnemonic):
            recover_from_mnemonic(value)

    @pytest.mark.parametrize(
        "value",
        [
            "not a real phrase",
            " ".join(["abandon"] * 12),
            "test test test test test test test test test test test junkk",
        ],
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidMnemonic):
            recover_from_mnemonic(value)


class TestCreateIdentity:
    def test_new_identity_has_twelve_word_mnemonic(self):
        identity = create_identity()
        assert identity.mnemonic is not None
        assert len(identity.mnemonic.split(" ")) == 12
        assert is_valid_mnemonic_input(identity.mnemonic)

    def test_private_key_recovers_same_address(self):
        identity = create_identity()
        assert recover_from_private_key(identity.private_key).address == identity.address

    def test_mnemonic_recovers_same_identity(self):
        identity = create_identity()
        assert recover_from_mnemonic(identity.mnemonic) == identity

    def test_identities_differ(self):
        assert create_identity().address != create_identity().address

    def test_entropy_failure(self, monkeypatch):
        def _broken(strength=128):
            raise OSError("no entropy")

        monkeypatch.setattr(wallet_service.MNEMONIC_GEN, "generate", _broken)
        with pytest.raises(EntropyUnavailable):
            create_identity()


class TestValidityProbes:
    def test_private_key_validity_check(self):
        assert is_valid_private_key_input(SAMPLE_PRIVATE_KEY)
        assert is_valid_private_key_input(SAMPLE_PRIVATE_KEY[2:])
        assert not is_valid_private_key_input("")
        assert not is_valid_private_key_input("0xnothex")

    def test_mnemonic_validity_check(self):
        assert not is_valid_mnemonic_input("")
        assert not is_valid_mnemonic_input("not a real phrase")
        assert is_valid_mnemonic_input(HARDHAT_MNEMONIC)
        assert is_valid_mnemonic_input("  " + HARDHAT_MNEMONIC.replace(" ", "   ") + " ")


class TestMaskAddress:
    def test_long_address(self):
        masked = mask_address(HARDHAT_ADDRESS)
        assert masked == "0xf39F...2266"
        assert len(masked) == 6 + 3 + 4

    @pytest.mark.parametrize("value", ["", "0x", "0x12345678"])
    def test_short_values_unchanged(self, value):
        assert mask_address(value) == value

    def test_custom_lengths(self):
        masked = mask_address(HARDHAT_ADDRESS, prefix_length=4, suffix_length=6)
        assert masked == HARDHAT_ADDRESS[:4] + "..." + HARDHAT_ADDRESS[-6:]

    def test_zero_suffix(self):
        assert mask_address(HARDHAT_ADDRESS, 6, 0) == HARDHAT_ADDRESS[:6] + "..."

    def test_negative_length(self):
        with pytest.raises(ValueError):
            mask_address(HARDHAT_ADDRESS, -1, 4)


class TestNormalizeAddress:
    def test_lower_case_is_checksummed(self):
        assert normalize_address(HARDHAT_ADDRESS.lower()) == HARDHAT_ADDRESS

    @pytest.mark.parametrize("value", ["", "not-an-address", "0x1234", HARDHAT_ADDRESS[:-1]])
    def test_invalid(self, value):
        with pytest.raises(InvalidAddress):
            normalize_address(value)
