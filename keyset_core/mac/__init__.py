from .aes_cmac import AesCmacKey, AesCmacParameters, Variant

__all__ = ["AesCmacKey", "AesCmacParameters", "Variant"]
