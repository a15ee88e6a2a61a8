from .product_payloads import product_result_to_loggable

__all__ = ["product_result_to_loggable"]
