#!/usr/bin/env python3
"""摇头看新闻 命令行入口"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from shaking_news import (
    Config,
    NewsAggregator,
    NewsPreloader,
    get_features_for_tier,
)
from shaking_news.models import to_json
from shaking_news.sources import is_trending_source, list_sources, resolve_api_path
from shaking_news.tiers import UserTier


def setup_logging(verbose: bool = False):
    """配置日志"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # 减少第三方库日志
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def print_sources():
    """列出所有数据源"""
    sources = list_sources()
    print("\n📰 热榜源列表\n")
    print(f"总计: {len(sources)} 个源\n")
    for s in sources:
        path = resolve_api_path(s.id)
        mapped = f" -> /{path}" if path != s.id else ""
        print(f"  {s.icon} {s.id}: {s.name}{mapped}")
    trending = ", ".join(s.id for s in list_sources(trending=True))
    print(f"\n📈 可用于趋势榜: {trending}\n")


def print_features(tier: str):
    """列出某层级的功能开关"""
    features = get_features_for_tier(tier)
    print(f"\n🔐 {tier} 层级功能\n")
    for name, enabled in features.to_dict().items():
        print(f"  {'✅' if enabled else '🔒'} {name}")
    print()


def print_items(title: str, items, as_json: bool):
    if as_json:
        print(to_json(items))
        return
    if not items:
        print(f"\n{title}: 暂无数据\n")
        return
    print(f"\n{title}\n")
    for i, item in enumerate(items, 1):
        hot = getattr(item, "hot", None)
        hot_str = f" 🔥{hot}" if hot is not None else ""
        print(f"  {i:>2}. {item.title}{hot_str}")
        print(f"      {getattr(item, 'url', None) or getattr(item, 'link', '')}")
    print()


async def run_queries(aggregator: NewsAggregator, args) -> int:
    if args.daily:
        daily = await aggregator.fetch_daily_news()
        if args.json:
            print(to_json(daily))
        elif daily:
            print(f"\n📅 {daily.date} {daily.day_of_week} {daily.lunar_date}\n")
            for i, line in enumerate(daily.news, 1):
                print(f"  {i:>2}. {line}")
            if daily.tip:
                print(f"\n  💡 {daily.tip}")
            print()
        else:
            print("\n每日新闻: 暂无数据\n")

    if args.ai:
        print_items("🤖 AI 资讯", await aggregator.fetch_ai_news(), args.json)

    if args.news:
        print_items(
            f"🗞️ 新闻 {args.news_source or 'latest'}",
            await aggregator.fetch_news(args.lang, args.news_source),
            args.json,
        )

    if args.home:
        home = await aggregator.get_home_page_news(args.lang, args.news_source, args.rss or [])
        print_items("🏠 首页新闻", home, args.json)

    for source_id in args.hot or []:
        print_items(f"🔥 热榜 {source_id}", await aggregator.fetch_hot_list(source_id), args.json)

    for source_id in args.trending or []:
        print_items(f"📈 趋势 {source_id}", await aggregator.fetch_trending(source_id), args.json)

    # --home 已经把 --rss 作为首页订阅使用
    if args.rss and not args.home:
        print_items("📡 RSS", await aggregator.fetch_rss_feeds(args.rss), args.json)

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="摇头看新闻 - 新闻 / 热榜聚合",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  python main.py --daily                 # 每日 60 秒新闻
  python main.py --hot weibo --hot baidu # 热榜
  python main.py --trending douyin       # 趋势榜
  python main.py --news --lang en        # 默认新闻源
  python main.py --home --rss https://example.com/feed.xml
  python main.py --rss https://example.com/feed.xml
  python main.py --preload               # 以守护进程预加载缓存
  python main.py --features member       # 查看层级功能
        """,
    )

    parser.add_argument("--daily", action="store_true", help="获取每日 60 秒新闻")
    parser.add_argument("--ai", action="store_true", help="获取 AI 资讯")
    parser.add_argument("--news", action="store_true", help="获取默认新闻源")
    parser.add_argument("--news-source", metavar="ID", help="指定新闻源（默认 everydaynews）")
    parser.add_argument("--lang", choices=["zh", "en"], default="zh", help="新闻语言（默认 zh）")
    parser.add_argument(
        "--home",
        action="store_true",
        help="首页新闻：优先使用 --rss 订阅，失败时回退到默认新闻源",
    )
    parser.add_argument("--hot", action="append", metavar="ID", help="获取热榜（可重复）")
    parser.add_argument("--trending", action="append", metavar="ID", help="获取趋势榜（可重复）")
    parser.add_argument("--rss", action="append", metavar="URL", help="获取 RSS 订阅（可重复）")
    parser.add_argument("--json", action="store_true", help="以 JSON 输出")
    parser.add_argument(
        "--preload",
        action="store_true",
        help="以守护进程模式定时预加载缓存",
    )
    parser.add_argument(
        "--interval",
        type=int,
        help="预加载间隔秒数（默认使用 .env 配置）",
    )
    parser.add_argument(
        "--features",
        choices=[t.value for t in UserTier],
        help="列出某层级可用的功能",
    )
    parser.add_argument(
        "--env",
        type=str,
        default=".env",
        help="环境变量文件路径（默认 .env）",
    )
    parser.add_argument("--list-sources", action="store_true", help="列出所有热榜源")
    parser.add_argument("-v", "--verbose", action="store_true", help="详细日志输出")

    args = parser.parse_args(argv)

    for source_id in args.trending or []:
        if not is_trending_source(source_id):
            choices = ", ".join(s.id for s in list_sources(trending=True))
            parser.error(f"未知的趋势源: {source_id}（可选: {choices}）")
    if args.interval is not None and args.interval <= 0:
        parser.error("--interval 必须大于 0")

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    if args.list_sources:
        print_sources()
        return 0

    if args.features:
        print_features(args.features)
        return 0

    env_file = args.env if Path(args.env).exists() else None
    config = Config.from_env(env_file)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        logger.error("请检查 .env 配置文件")
        return 1

    aggregator = NewsAggregator(config)

    if args.preload:
        logger.info("启动预加载守护进程...")
        preloader = NewsPreloader(aggregator, config)
        try:
            asyncio.run(preloader.serve(args.interval, handle_signals=True))
        except KeyboardInterrupt:
            logger.info("预加载守护进程已退出")
        return 0

    if not any([args.daily, args.ai, args.news, args.home, args.hot, args.trending, args.rss]):
        parser.print_help()
        return 0

    return asyncio.run(run_queries(aggregator, args))


if __name__ == "__main__":
    sys.exit(main())
