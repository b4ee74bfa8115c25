from .counter_store_port import CounterRecord, CounterStorePort

__all__ = ["CounterRecord", "CounterStorePort"]
