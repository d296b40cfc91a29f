from typing import Callable

from loguru import logger

from medbook.config import AppConfig, StoreAdapter
from medbook.records.adapters.json_file import JsonFileRecordStore
from medbook.records.adapters.memory import InMemoryRecordStore
from medbook.records.ports import RecordStoreProtocol


def _build_json(config: AppConfig) -> RecordStoreProtocol:
    return JsonFileRecordStore(config.store.data_dir)


def _build_memory(config: AppConfig) -> RecordStoreProtocol:
    return InMemoryRecordStore()


_BUILDERS: dict[StoreAdapter, Callable[[AppConfig], RecordStoreProtocol]] = {
    StoreAdapter.JSON: _build_json,
    StoreAdapter.MEMORY: _build_memory,
}


def build_record_store(config: AppConfig) -> RecordStoreProtocol:
    """Build the record store selected in config."""
    adapter = config.store.adapter
    logger.info("Building record store with adapter: {}", adapter.value)
    return _BUILDERS[adapter](config)
