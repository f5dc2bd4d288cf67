"""
Main entry point for the executive order monitor.
"""

import sys
import json
import logging
import argparse
from dataclasses import dataclass
import structlog

from .core.config import settings, Settings
from .core.cache import OrderCache
from .core.exceptions import EOMonitorError, NotFoundError
from .ingestion import FederalRegisterClient
from .orchestration import OrderService, Scheduler, SummaryQueue
from .storage import KeyValueStore, build_store
from .summarization import Summarizer, get_summarizer


def setup_logging(level: str = "INFO"):
    """Configure structured logging."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@dataclass
class Components:
    store: KeyValueStore
    fetcher: FederalRegisterClient
    summarizer: Summarizer
    cache: OrderCache
    queue: SummaryQueue
    service: OrderService
    scheduler: Scheduler


def build_components(config: Settings = settings) -> Components:
    """Wire the store, fetcher, backend, cache and queue from configuration."""
    store = build_store(config)
    fetch_config = config.fetch_config()
    fetcher = FederalRegisterClient(
        base_url=config.federal_register_base_url,
        timeout=config.http_timeout_seconds,
        config=fetch_config,
    )
    summarizer = get_summarizer(config)

    cache = OrderCache(store, fetcher, fetch_config)
    queue = SummaryQueue(store, cache, fetcher, summarizer, config.queue_config())
    cache.attach_queue(queue)

    return Components(
        store=store,
        fetcher=fetcher,
        summarizer=summarizer,
        cache=cache,
        queue=queue,
        service=OrderService(cache, queue, allow_regenerate=config.allow_regenerate),
        scheduler=Scheduler(cache, queue, config.schedule_interval_seconds),
    )


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Executive order cache and summary queue"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    refresh_parser = subparsers.add_parser('refresh', help='Refresh the order snapshot')
    refresh_parser.add_argument(
        '--enqueue',
        action='store_true',
        help='Queue summaries for orders not yet tracked'
    )

    subparsers.add_parser('process', help='Process one batch of the summary queue')
    subparsers.add_parser('tick', help='Run one scheduled refresh + batch')

    serve_parser = subparsers.add_parser('serve', help='Run the scheduler loop')
    serve_parser.add_argument(
        '--interval',
        type=int,
        default=settings.schedule_interval_seconds,
        help='Seconds between ticks (default: %(default)s)'
    )

    subparsers.add_parser('orders', help='List cached orders')

    order_parser = subparsers.add_parser('order', help='Show one order and its summary')
    order_parser.add_argument('document_number', help='Federal Register document number')

    regenerate_parser = subparsers.add_parser('regenerate', help='Regenerate one summary')
    regenerate_parser.add_argument('document_number', help='Federal Register document number')

    subparsers.add_parser('queue', help='Show summary queue statistics')
    subparsers.add_parser('health', help='Check system health')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(settings.log_level)
    logger = structlog.get_logger(__name__)

    components = build_components(settings)

    try:
        if args.command == 'refresh':
            snapshot = components.cache.refresh(enqueue_summaries=args.enqueue)
            print(f"Cached {len(snapshot.orders)} orders at {snapshot.last_updated.isoformat()}")

        elif args.command == 'process':
            result = components.queue.process_batch()
            print(result.model_dump_json(indent=2))

        elif args.command == 'tick':
            outcome = components.scheduler.run_once()
            if outcome["errors"]:
                return 1

        elif args.command == 'serve':
            components.scheduler.interval_seconds = args.interval
            try:
                components.scheduler.run_forever()
            except KeyboardInterrupt:
                logger.info("Interrupted, shutting down")

        elif args.command == 'orders':
            result = components.service.list_orders()
            if result.pending:
                print(result.message)
                # the CLI exits afterwards, so let the first refresh finish
                components.service.wait_for_refresh()
            else:
                for order in result.orders:
                    print(f"{order.document_number}\tEO {order.executive_order_number or '-'}\t"
                          f"{order.publication_date}\t{order.title}")

        elif args.command == 'order':
            detail = components.service.get_order(args.document_number)
            print(detail.model_dump_json(indent=2))

        elif args.command == 'regenerate':
            record = components.service.regenerate_summary(args.document_number)
            if record is None:
                print("disabled")
            else:
                print(record.content)

        elif args.command == 'queue':
            print(components.queue.stats().model_dump_json(indent=2))

        elif args.command == 'health':
            health_status = {
                "store": components.store.health_check(),
                "federal_register": components.fetcher.health_check(),
                "summarizer": components.summarizer.health_check(),
            }
            print(json.dumps(health_status, indent=2))
            return 0 if all(health_status.values()) else 1

    except NotFoundError as e:
        logger.warning("Not found", document_number=e.document_number)
        print(str(e))
        return 1
    except EOMonitorError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
