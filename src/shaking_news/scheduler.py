"""缓存预加载任务调度模块"""

import asyncio
import logging
import signal
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .aggregator import NewsAggregator
from .config import Config
from .sources import HOT_LIST_SOURCES

logger = logging.getLogger(__name__)

JOB_ID = "news_preload"


class NewsPreloader:
    """定时刷新缓存，使展示层读取时尽量命中"""

    def __init__(self, aggregator: NewsAggregator, config: Config):
        self.aggregator = aggregator
        self.config = config
        self.scheduler = AsyncIOScheduler()
        self._callback: Optional[Callable] = None

    def set_callback(self, callback: Callable):
        """设置预加载完成回调，参数为各类数据的条数"""
        self._callback = callback

    async def run_once(self) -> dict[str, int]:
        """预加载每日新闻、AI 资讯和全部热榜"""
        start_time = datetime.now()
        logger.info("开始预加载...")

        source_ids = [s.id for s in HOT_LIST_SOURCES]
        daily, ai_news, hot_lists = await asyncio.gather(
            self.aggregator.fetch_daily_news(),
            self.aggregator.fetch_ai_news(),
            self.aggregator.fetch_hot_lists(source_ids),
        )

        counts = {
            "daily": len(daily.news) if daily else 0,
            "ai-news": len(ai_news) if ai_news else 0,
        }
        for source_id, items in hot_lists.items():
            counts[f"hot:{source_id}"] = len(items)

        empty = [k for k, v in counts.items() if v == 0]
        if empty:
            logger.warning(f"以下数据为空: {', '.join(empty)}")

        duration = (datetime.now() - start_time).total_seconds()
        logger.info(f"预加载完成，耗时 {duration:.1f} 秒")

        if self._callback:
            try:
                self._callback(counts)
            except Exception as e:
                logger.error(f"回调执行失败: {e}")

        return counts

    async def _scheduled_task(self):
        """定时任务包装器"""
        try:
            await self.run_once()
        except Exception as e:
            logger.error(f"预加载任务执行失败: {e}")

    def _resolve_interval(self, interval_seconds: Optional[int]) -> int:
        if interval_seconds is None:
            interval_seconds = self.config.preload_interval
        if interval_seconds <= 0:
            raise ValueError(f"无效的预加载间隔: {interval_seconds}")
        return interval_seconds

    def start(self, interval_seconds: Optional[int] = None):
        """启动定时任务，必须在运行中的事件循环里调用"""
        interval_seconds = self._resolve_interval(interval_seconds)

        try:
            tz = ZoneInfo(self.config.timezone)
        except Exception:
            tz = ZoneInfo("Asia/Shanghai")

        self.scheduler.add_job(
            self._scheduled_task,
            trigger=IntervalTrigger(seconds=interval_seconds, timezone=tz),
            id=JOB_ID,
            name="缓存预加载任务",
            replace_existing=True,
        )

        self.scheduler.start()
        logger.info(f"预加载任务已启动，间隔 {interval_seconds} 秒")

    def stop(self):
        """停止定时任务

        AsyncIOScheduler 在事件循环的下一轮才真正关闭，调用方需要让出一次循环。
        """
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("预加载任务已停止")

    async def serve(
        self,
        interval_seconds: Optional[int] = None,
        stop_event: Optional[asyncio.Event] = None,
        handle_signals: bool = False,
    ):
        """守护进程主协程：先预加载一次，再按间隔刷新，直到 stop_event 被设置"""
        interval_seconds = self._resolve_interval(interval_seconds)
        if stop_event is None:
            stop_event = asyncio.Event()

        loop = asyncio.get_running_loop()
        signals = []
        if handle_signals:
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, stop_event.set)
                    signals.append(sig)
                except NotImplementedError:
                    # Windows 没有 add_signal_handler，Ctrl+C 由 asyncio.run 处理
                    logger.debug(f"当前平台不支持信号处理: {sig}")

        try:
            await self.run_once()
            self.start(interval_seconds)
            await stop_event.wait()
            logger.info("收到停止信号，正在关闭...")
        finally:
            for sig in signals:
                loop.remove_signal_handler(sig)
            self.stop()
            await asyncio.sleep(0)

    def get_next_run_time(self) -> Optional[datetime]:
        """获取下次执行时间"""
        job = self.scheduler.get_job(JOB_ID)
        if job:
            return job.next_run_time
        return None
