"""Тесты для Dynamic Fee Engine.

Coverage:
- Cold start (нет Indicator[epoch-2] или Indicator[epoch-1])
- Мемоизация (повторный запрос без изменения состояния)
- Монотонный отклик на тренд (рост, падение, равенство)
- Неотрицательность при длительном падении
- Ноль как легитимная комиссия (не sentinel)
- Независимость пулов и сторон
- Полный сценарий epochs 100-103, base fee 3000
- Конкурентные запросы одного слота
- Снапшот истории пула
"""

import threading

import pytest

from src.core.domain.fee import PriceTrend, TradeDirection
from src.core.domain.pool import PoolKey
from src.engine import DynamicFeeEngine, FeeEngineConfig
from src.history import RetentionPolicy

BASE_FEE = 3000


@pytest.fixture
def pool():
    return PoolKey.dynamic("ETH-USDC", "ETH", "USDC", base_fee=BASE_FEE)


@pytest.fixture
def other_pool():
    return PoolKey.dynamic("WBTC-USDC", "WBTC", "USDC", base_fee=500)


@pytest.fixture
def engine():
    return DynamicFeeEngine()


def seed_indicators(engine, pool_id, ticks):
    """Запись indicator по epoch: {epoch: tick}."""
    for epoch, tick in ticks.items():
        engine.record_indicator(pool_id, epoch, tick)


class TestColdStart:
    """Тесты cold start."""

    def test_no_history_returns_base_fee(self, engine, pool):
        assert engine.get_fee(pool, 100, TradeDirection.SELL) == BASE_FEE
        assert engine.get_fee(pool, 100, TradeDirection.BUY) == BASE_FEE

    def test_cold_start_persists_both_sides(self, engine, pool):
        """Запрос одной стороны фиксирует обе стороны epoch."""
        engine.get_fee(pool, 100, TradeDirection.SELL)

        assert engine.get_sell_fee(pool.pool_id, 100) == BASE_FEE
        assert engine.get_buy_fee(pool.pool_id, 100) == BASE_FEE

    def test_single_epoch_of_history_is_cold(self, engine, pool):
        """Одна epoch истории недостаточна для тренда."""
        seed_indicators(engine, pool.pool_id, {100: 10})

        quote = engine.get_fee_quote(pool, 101, TradeDirection.BUY)
        assert quote.cold_start
        assert quote.fee == BASE_FEE
        assert quote.trend is None

    def test_gap_in_previous_epoch_is_cold(self, engine, pool):
        """Indicator[epoch-2] есть, Indicator[epoch-1] нет (пропуск торговли)."""
        seed_indicators(engine, pool.pool_id, {100: 10})

        quote = engine.get_fee_quote(pool, 102, TradeDirection.SELL)
        assert quote.cold_start
        assert quote.fee == BASE_FEE

    def test_early_epochs(self, engine, pool):
        """Epoch 0 и 1: epoch-2 отрицательная, истории нет."""
        assert engine.get_fee(pool, 0, TradeDirection.BUY) == BASE_FEE
        assert engine.get_fee(pool, 1, TradeDirection.BUY) == BASE_FEE

    def test_cold_start_memoized(self, engine, pool):
        first = engine.get_fee_quote(pool, 100, TradeDirection.SELL)
        second = engine.get_fee_quote(pool, 100, TradeDirection.SELL)

        assert not first.memoized
        assert second.memoized
        assert first.fee == second.fee == BASE_FEE


class TestMemoization:
    """Тесты мемоизации."""

    def test_repeated_query_same_value(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})

        first = engine.get_fee_quote(pool, 102, TradeDirection.BUY)
        second = engine.get_fee_quote(pool, 102, TradeDirection.BUY)

        assert first.fee == second.fee
        assert not first.memoized
        assert second.memoized
        assert second.delta is None

    def test_second_query_no_state_change(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        engine.get_fee(pool, 102, TradeDirection.BUY)
        before = engine.export_pool_history(pool.pool_id)

        engine.get_fee(pool, 102, TradeDirection.BUY)
        assert engine.export_pool_history(pool.pool_id) == before

    def test_current_epoch_indicator_does_not_perturb_fee(self, engine, pool):
        """Запись indicator текущей epoch не меняет её комиссию."""
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        fee = engine.get_fee(pool, 102, TradeDirection.SELL)

        engine.record_indicator(pool.pool_id, 102, -1000)
        engine.record_indicator(pool.pool_id, 102, 5000)

        assert engine.get_fee(pool, 102, TradeDirection.SELL) == fee

    def test_sides_computed_independently(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        engine.get_fee(pool, 102, TradeDirection.SELL)

        assert engine.get_sell_fee(pool.pool_id, 102) is not None
        assert engine.get_buy_fee(pool.pool_id, 102) is None


class TestMonotoneResponse:
    """Тесты отклика на тренд."""

    def test_increasing_trend(self, engine, pool):
        """Рост: BUY >= prev, SELL <= prev."""
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})

        buy = engine.get_fee_quote(pool, 102, TradeDirection.BUY)
        sell = engine.get_fee_quote(pool, 102, TradeDirection.SELL)

        assert buy.trend == PriceTrend.INCREASING
        assert buy.delta == 300
        assert buy.fee == 3300
        assert sell.fee == 2700

    def test_decreasing_trend(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 20, 101: 10})

        assert engine.get_fee(pool, 102, TradeDirection.BUY) == 2700
        assert engine.get_fee(pool, 102, TradeDirection.SELL) == 3300

    def test_tie_counts_as_not_increasing(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 15, 101: 15})

        quote = engine.get_fee_quote(pool, 102, TradeDirection.BUY)
        assert quote.trend == PriceTrend.NOT_INCREASING
        assert quote.fee == 2700

    def test_absent_previous_fees_use_base_fee(self, engine, pool):
        """Fee History за epoch-1 пуста (не было запросов) → base fee."""
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        assert engine.get_buy_fee(pool.pool_id, 101) is None

        assert engine.get_fee(pool, 102, TradeDirection.BUY) == 3300

    def test_absent_single_previous_side_uses_base_fee(self, engine, pool):
        """epoch-1 вычислена только для SELL: prev BUY = base fee."""
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20, 102: 30})
        assert engine.get_fee(pool, 102, TradeDirection.SELL) == 2700

        # prev_buy = 3000 (base), prev_sell = 2700 → avg 2850 → delta 285
        quote = engine.get_fee_quote(pool, 103, TradeDirection.BUY)
        assert quote.delta == 285
        assert quote.fee == 3285


class TestNonNegativity:
    """Тесты неотрицательности."""

    def test_long_decreasing_trend_never_negative(self, pool):
        engine = DynamicFeeEngine(config=FeeEngineConfig(step_pct=100))
        ticks = {epoch: 1000 - epoch for epoch in range(100, 130)}
        seed_indicators(engine, pool.pool_id, ticks)

        for epoch in range(100, 131):
            assert engine.get_fee(pool, epoch, TradeDirection.BUY) >= 0
            assert engine.get_fee(pool, epoch, TradeDirection.SELL) >= 0

    def test_zero_fee_is_not_reset_to_base(self, pool):
        """Ноль — реальная комиссия: следующая epoch считает от нуля."""
        engine = DynamicFeeEngine(config=FeeEngineConfig(step_pct=100))
        seed_indicators(engine, pool.pool_id, {100: 30, 101: 20, 102: 10})

        # prev 3000/3000, delta 3000 → BUY 0, SELL 6000
        assert engine.get_fee(pool, 102, TradeDirection.BUY) == 0
        assert engine.get_fee(pool, 102, TradeDirection.SELL) == 6000

        # prev 0/6000, avg 3000 → delta 3000 → BUY остаётся 0
        assert engine.get_fee(pool, 103, TradeDirection.BUY) == 0
        assert engine.get_buy_fee(pool.pool_id, 103) == 0
        assert engine.get_fee(pool, 103, TradeDirection.SELL) == 9000

    def test_increase_capped_at_max_fee(self, pool):
        engine = DynamicFeeEngine(config=FeeEngineConfig(max_fee=3100))
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})

        assert engine.get_fee(pool, 102, TradeDirection.BUY) == 3100

    def test_base_fee_above_max_fee_rejected(self, pool):
        engine = DynamicFeeEngine(config=FeeEngineConfig(max_fee=1000))
        with pytest.raises(ValueError, match="exceeds max_fee"):
            engine.get_fee(pool, 100, TradeDirection.BUY)


class TestPoolIndependence:
    """Тесты независимости пулов."""

    def test_pool_a_does_not_affect_pool_b(self, engine, pool, other_pool):
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        engine.get_fee(pool, 102, TradeDirection.BUY)

        assert engine.get_buy_fee(other_pool.pool_id, 102) is None
        assert engine.get_indicator(other_pool.pool_id, 100) is None
        assert engine.get_fee(other_pool, 102, TradeDirection.BUY) == 500


class TestConcreteScenario:
    """Сценарий epochs 100-103, base fee 3000."""

    def test_full_scenario(self, engine, pool):
        # Epoch 100: нет истории
        assert engine.get_fee(pool, 100, TradeDirection.SELL) == 3000
        assert engine.get_fee(pool, 100, TradeDirection.BUY) == 3000
        engine.record_indicator(pool.pool_id, 100, 100)

        # Epoch 101: одна epoch истории
        assert engine.get_fee(pool, 101, TradeDirection.SELL) == 3000
        assert engine.get_fee(pool, 101, TradeDirection.BUY) == 3000
        engine.record_indicator(pool.pool_id, 101, 110)

        # Epoch 102: рост, delta = 300
        assert engine.get_fee(pool, 102, TradeDirection.BUY) == 3300
        assert engine.get_fee(pool, 102, TradeDirection.SELL) == 2700
        engine.record_indicator(pool.pool_id, 102, 105)

        # Epoch 103: разворот, delta = floor((3300 + 2700) / 2 * 0.10) = 300
        assert engine.get_fee(pool, 103, TradeDirection.SELL) == 3000
        assert engine.get_fee(pool, 103, TradeDirection.BUY) == 3000

    def test_string_direction_accepted(self, engine, pool):
        assert engine.get_fee(pool, 100, "sell") == 3000


class TestConcurrency:
    """Тесты конкурентных запросов."""

    def test_concurrent_queries_observe_single_value(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        results = []
        barrier = threading.Barrier(10)

        def query():
            barrier.wait()
            results.append(engine.get_fee(pool, 102, TradeDirection.BUY))

        threads = [threading.Thread(target=query) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [3300] * 10


class TestPoolHistorySnapshot:
    """Тесты снапшота истории пула."""

    def test_export_structure(self, engine, pool):
        seed_indicators(engine, pool.pool_id, {100: 10, 101: 20})
        engine.get_fee(pool, 102, TradeDirection.SELL)

        snapshot = engine.export_pool_history(pool.pool_id)

        assert snapshot["pool_id"] == pool.pool_id
        assert snapshot["indicators"] == [
            {"epoch": 100, "value": 10},
            {"epoch": 101, "value": 20},
        ]
        assert snapshot["fees"] == [{"epoch": 102, "buy_fee": None, "sell_fee": 2700}]

    def test_export_unknown_pool_is_empty(self, engine):
        snapshot = engine.export_pool_history("missing")
        assert snapshot["indicators"] == []
        assert snapshot["fees"] == []

    def test_retention_keeps_engine_window(self, pool):
        """Окно retention=3 достаточно для расчёта."""
        engine = DynamicFeeEngine(
            config=FeeEngineConfig(retention=RetentionPolicy(keep_epochs=3))
        )
        for epoch in range(100, 110):
            engine.get_fee(pool, epoch, TradeDirection.BUY)
            engine.get_fee(pool, epoch, TradeDirection.SELL)
            engine.record_indicator(pool.pool_id, epoch, epoch)

        snapshot = engine.export_pool_history(pool.pool_id)
        assert [i["epoch"] for i in snapshot["indicators"]] == [107, 108, 109]
        # Непрерывный рост: BUY растёт каждую epoch после cold start
        assert engine.get_buy_fee(pool.pool_id, 109) > BASE_FEE
