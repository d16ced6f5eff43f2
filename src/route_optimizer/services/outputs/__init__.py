from .routing_formatter import optimization_result_to_csv, optimization_result_to_json

__all__ = ["optimization_result_to_json", "optimization_result_to_csv"]
