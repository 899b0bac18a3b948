import os

import pytest

from core.crypto_engine import AESGCMCipher, DefaultCryptoProvider, RSACrypto
from core.errors import CryptoError


def test_aes_gcm_layout_and_round_trip():
    key = os.urandom(32)
    cipher = AESGCMCipher(key)
    blob = cipher.encrypt(b"hello")
    assert len(blob) == AESGCMCipher.NONCE_SIZE + 5 + AESGCMCipher.TAG_SIZE
    assert cipher.decrypt(blob) == b"hello"
    assert cipher.cipher_name == "AES-256-GCM"
    assert cipher.key_size_bits == 256


def test_aes_gcm_rejects_bad_key_length():
    with pytest.raises(ValueError):
        AESGCMCipher(b"short")


def test_aes_gcm_tamper_detection():
    cipher = AESGCMCipher(os.urandom(32))
    blob = bytearray(cipher.encrypt(b"Test tamper detection"))
    blob[len(blob) // 2] ^= 0xFF
    with pytest.raises(CryptoError):
        cipher.decrypt(bytes(blob))


def test_aes_gcm_wrong_key():
    blob = AESGCMCipher(os.urandom(32)).encrypt(b"secret")
    with pytest.raises(CryptoError):
        AESGCMCipher(os.urandom(32)).decrypt(blob)


def test_aes_gcm_short_ciphertext():
    with pytest.raises(CryptoError, match="too short"):
        AESGCMCipher(os.urandom(32)).decrypt(b"\x01\x02\x03")


class TestDefaultCryptoProvider:

    @pytest.fixture
    def provider(self):
        return DefaultCryptoProvider(rsa_key_size=1024)

    def test_keypairs_are_fresh(self, provider):
        a = provider.generate_keypair()
        b = provider.generate_keypair()
        assert (provider.marshal_public_key(a.public_key)
                != provider.marshal_public_key(b.public_key))

    def test_key_transport(self, provider):
        keypair = provider.generate_keypair()
        marshaled = provider.marshal_public_key(keypair.public_key)
        assert marshaled.startswith(b"-----BEGIN PUBLIC KEY-----")

        public_key = provider.load_public_key(marshaled)
        secret = os.urandom(32)
        wrapped = provider.encrypt_asymmetric(public_key, secret)
        assert provider.decrypt_asymmetric(keypair.private_key, wrapped) == secret

    def test_asymmetric_decrypt_with_wrong_key(self, provider):
        a = provider.generate_keypair()
        b = provider.generate_keypair()
        wrapped = provider.encrypt_asymmetric(a.public_key, b"k" * 32)
        with pytest.raises(CryptoError):
            provider.decrypt_asymmetric(b.private_key, wrapped)

    def test_load_garbage_public_key(self, provider):
        with pytest.raises(CryptoError):
            provider.load_public_key(b"not a key")

    def test_symmetric(self, provider):
        key = os.urandom(32)
        blob = provider.encrypt_symmetric(key, b"payload")
        assert provider.decrypt_symmetric(key, blob) == b"payload"

    def test_keypair_repr_hides_private_key(self, provider):
        assert "hidden" in repr(provider.generate_keypair())


def test_rsa_crypto_instance_keys():
    rsa = RSACrypto(key_size=1024)
    rsa.generate_keys()
    assert rsa.decrypt(rsa.encrypt(b"abc")) == b"abc"
