"""Unit tests for the LazyComponent descriptor."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from mongo_repository.repository import LazyComponent


class Widget:
    pass


class Holder:
    built = 0

    component: LazyComponent[Widget] = LazyComponent(lambda holder: holder.build())

    def build(self) -> Widget:
        type(self).built += 1
        # widen the race window
        time.sleep(0.01)
        return Widget()


class TestLazyComponent:
    def setup_method(self) -> None:
        Holder.built = 0

    def test_not_built_until_first_access(self) -> None:
        holder = Holder()
        assert Holder.component.is_built(holder) is False
        widget = holder.component
        assert isinstance(widget, Widget)
        assert Holder.component.is_built(holder) is True

    def test_same_instance_on_every_access(self) -> None:
        holder = Holder()
        assert holder.component is holder.component
        assert Holder.built == 1

    def test_one_component_per_owner(self) -> None:
        first, second = Holder(), Holder()
        assert first.component is not second.component

    def test_concurrent_first_access_builds_once(self) -> None:
        holder = Holder()
        workers = 16
        barrier = threading.Barrier(workers)

        def read() -> Any:
            barrier.wait()
            return holder.component

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: read(), range(workers)))

        assert Holder.built == 1
        assert all(r is results[0] for r in results)

    def test_injected_component_is_used(self) -> None:
        holder = Holder()
        stub = Widget()
        holder.component = stub
        assert holder.component is stub
        assert Holder.built == 0

    def test_class_access_returns_descriptor(self) -> None:
        assert isinstance(Holder.component, LazyComponent)


class Assembly:
    part: LazyComponent[Widget] = LazyComponent(lambda assembly: Widget())
    # the factory reads another lazy component of the same owner
    whole: LazyComponent[list[Widget]] = LazyComponent(lambda assembly: [assembly.part])


class TestNestedFactories:
    def test_factory_reading_another_component(self) -> None:
        assembly = Assembly()
        result: list[Any] = []
        worker = threading.Thread(target=lambda: result.append(assembly.whole))
        worker.start()
        worker.join(timeout=5)
        assert not worker.is_alive()
        assert result[0] == [assembly.part]
