from .client import HttpxChartTransport, error_from_response

__all__ = ["HttpxChartTransport", "error_from_response"]
