"""
Tests for the memoized supplier.
"""
import threading
from unittest.mock import Mock

import pytest

from indexbridge.util.memoize import MemoizedSupplier, memoize


def test_evaluated_once():
    fetcher = Mock(return_value='value')
    supplier = memoize(fetcher)

    assert supplier.get() == 'value'
    assert supplier.get() == 'value'
    assert supplier() == 'value'
    assert fetcher.call_count == 1


def test_lazy():
    fetcher = Mock(return_value='value')
    supplier = MemoizedSupplier(fetcher)

    assert not supplier.evaluated()
    fetcher.assert_not_called()


def test_failure_is_not_cached():
    fetcher = Mock(side_effect=[IOError('down'), 'value'])
    supplier = memoize(fetcher)

    with pytest.raises(IOError):
        supplier.get()
    assert not supplier.evaluated()
    assert supplier.get() == 'value'
    assert fetcher.call_count == 2


def test_none_is_cached():
    fetcher = Mock(return_value=None)
    supplier = memoize(fetcher)

    supplier.get()
    supplier.get()

    assert fetcher.call_count == 1


def test_concurrent_reads():
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow_fetcher():
        calls.append(1)
        started.set()
        release.wait(5)
        return 'value'

    supplier = memoize(slow_fetcher)
    results = []
    threads = [threading.Thread(target=lambda: results.append(supplier.get()))
               for _ in range(4)]
    for thread in threads:
        thread.start()
    started.wait(5)
    release.set()
    for thread in threads:
        thread.join(5)

    assert results == ['value'] * 4
    assert len(calls) == 1
