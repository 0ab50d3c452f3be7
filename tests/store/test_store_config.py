"""Tests for store sizing configuration."""

import pytest

from py_tinyconfig.store.config import (
    DEFAULT_GROW_BY,
    DEFAULT_INITIAL_CAPACITY,
    DEFAULT_LINE_SIZE,
    CapacityPolicy,
    StoreConfig,
)

MAX_ENTRIES = 3
LINE_SIZE = 64


class TestStoreConfig:
    """Verify defaults, presets, and validation."""

    def test_defaults_are_growable(self) -> None:
        """The default configuration grows on demand."""
        config = StoreConfig()
        assert config.policy is CapacityPolicy.GROWABLE
        assert not config.is_fixed
        assert config.initial_capacity == DEFAULT_INITIAL_CAPACITY
        assert config.grow_by == DEFAULT_GROW_BY
        assert config.line_size == DEFAULT_LINE_SIZE
        assert config.memory_limit is None

    def test_fixed_preset(self) -> None:
        """StoreConfig.fixed selects the arena policy."""
        config = StoreConfig.fixed(max_entries=MAX_ENTRIES, line_size=LINE_SIZE)
        assert config.is_fixed
        assert config.max_entries == MAX_ENTRIES
        assert config.line_size == LINE_SIZE

    @pytest.mark.parametrize("field", ["initial_capacity", "grow_by", "line_size", "max_entries"])
    def test_rejects_non_positive_sizes(self, field: str) -> None:
        """Zero sizes can never hold an entry."""
        with pytest.raises(ValueError, match=field):
            StoreConfig(**{field: 0})

    def test_rejects_bad_max_line_size(self) -> None:
        """max_line_size must be positive when given."""
        with pytest.raises(ValueError, match="max_line_size"):
            StoreConfig.growable(max_line_size=0)

    def test_rejects_negative_memory_limit(self) -> None:
        """memory_limit cannot be negative."""
        with pytest.raises(ValueError, match="memory_limit"):
            StoreConfig.growable(memory_limit=-1)

    def test_is_immutable(self) -> None:
        """Configurations are frozen."""
        config = StoreConfig()
        with pytest.raises(AttributeError):
            config.grow_by = 1  # type: ignore[misc]
