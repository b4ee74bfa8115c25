#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
idseries - 部署与运维入口

迁移建表、查看计数器、手工签发/预置编号。
业务模块在进程内直接调用 IssuanceEngine.next()，不经过此脚本。
"""

import sys
import os
import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# 添加 src 目录到 Python 路径，未安装时也能运行
current_dir = Path(__file__).parent.absolute()
for p in (current_dir / "src", current_dir):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config.validated_settings import load_validated_settings  # noqa: E402
from idseries.bootstrap import build_issuance_engine, build_registry  # noqa: E402
from idseries.core.errors import IdSeriesError  # noqa: E402
from idseries.infrastructure.logging import configure_logging  # noqa: E402
from idseries.infrastructure.migrations import MigrationManager  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="idseries - 顺序编号签发服务")
    parser.add_argument('--config', default=os.getenv("IDSERIES_CONFIG"),
                        help='配置文件路径 (YAML)，缺省为 config/config.yaml')
    parser.add_argument('--db-url', dest='db_url', default=None,
                        help='覆盖数据库 URL (IDSERIES_DB_URL)')
    parser.add_argument('--log-level', dest='log_level', default=None,
                        help='日志级别 (DEBUG/INFO/WARNING)')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    subparsers.add_parser('migrate', help='创建/升级计数器表（幂等）')

    legacy_parser = subparsers.add_parser('migrate-legacy', help='替换旧版 naming_series_counters 表（会丢弃旧计数）')
    legacy_parser.add_argument('--yes', action='store_true', help='确认执行破坏性迁移')

    subparsers.add_parser('status', help='显示迁移状态')

    next_parser = subparsers.add_parser('next', help='签发一个编号')
    next_parser.add_argument('series', help='序列代码，例如 member_ind')
    next_parser.add_argument('--date', default=None, help='按指定日期签发 (YYYY-MM-DD)')

    subparsers.add_parser('counters', help='列出所有计数器')

    seed_parser = subparsers.add_parser('seed', help='抬高计数器下限（导入已有编号时使用）')
    seed_parser.add_argument('series', help='序列代码')
    seed_parser.add_argument('value', type=int, help='已使用的最大序号')
    seed_parser.add_argument('--year', type=int, default=None, help='按年序列的年份')

    subparsers.add_parser('check-config', help='校验序列配置')

    return parser


def _db_url(args, settings) -> Optional[str]:
    return args.db_url or settings.database.url or None


def cmd_migrate(args, settings) -> int:
    manager = MigrationManager(_db_url(args, settings))
    try:
        revision = manager.upgrade()
    finally:
        manager.close()
    print(f"✅ 数据库已迁移到 {revision}")
    return 0


def cmd_migrate_legacy(args, settings) -> int:
    if not args.yes:
        print("❌ 该操作会删除旧表及其计数，请加 --yes 确认")
        return 1
    manager = MigrationManager(_db_url(args, settings))
    try:
        replaced = manager.replace_legacy_yearly_table(confirm=True)
    finally:
        manager.close()
    print("✅ 旧表已替换" if replaced else "✅ 无需替换")
    return 0


def cmd_status(args, settings) -> int:
    manager = MigrationManager(_db_url(args, settings))
    try:
        print(json.dumps(manager.status(), ensure_ascii=False, indent=2))
    finally:
        manager.close()
    return 0


def cmd_next(args, settings) -> int:
    engine = build_issuance_engine(settings, db_url=args.db_url)
    try:
        now = datetime.strptime(args.date, "%Y-%m-%d") if args.date else None
        print(engine.next(args.series, now))
    finally:
        engine.store.close()
    return 0


def cmd_counters(args, settings) -> int:
    engine = build_issuance_engine(settings, db_url=args.db_url)
    try:
        for record in engine.store.list_counters():
            year = record.year if record.year is not None else "-"
            print(f"{record.series_code}\t{year}\t{record.value}")
    finally:
        engine.store.close()
    return 0


def cmd_seed(args, settings) -> int:
    engine = build_issuance_engine(settings, db_url=args.db_url)
    try:
        value = engine.seed(args.series, args.value, year=args.year)
    finally:
        engine.store.close()
    print(f"✅ {args.series} 计数器当前为 {value}")
    return 0


def cmd_check_config(args, settings) -> int:
    registry = build_registry(settings)
    for code, desc in sorted(registry.all().items()):
        print(f"{code}\t{desc.scope.value}\t{desc.template}\twidth={desc.width}")
    print(f"✅ {len(registry)} 个序列配置有效")
    return 0


COMMANDS = {
    'migrate': cmd_migrate,
    'migrate-legacy': cmd_migrate_legacy,
    'status': cmd_status,
    'next': cmd_next,
    'counters': cmd_counters,
    'seed': cmd_seed,
    'check-config': cmd_check_config,
}


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = load_validated_settings(args.config)
        configure_logging(settings.logging, level=args.log_level)
        return COMMANDS[args.command](args, settings)
    except IdSeriesError as e:
        print(f"❌ {e}")
        return 1
    except ValueError as e:
        print(f"❌ 参数错误: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
