from btc_dca.validation.sanitizer import InputSanitizer

__all__ = ["InputSanitizer"]
