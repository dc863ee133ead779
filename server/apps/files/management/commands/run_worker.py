"""Management command to run the background job worker."""

import logging
from typing import Any, final, override

from django.core.management.base import BaseCommand

from server.apps.files.tasks import register_consumers
from server.apps.jobs.logic.queue import JobQueue, recover_stale_jobs

logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Consume thumbnail and welcome jobs."""

    help = 'Run the worker that generates thumbnails and sends greetings'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--once',
            action='store_true',
            help='Process available jobs, then exit',
        )
        parser.add_argument(
            '--poll-interval',
            type=float,
            default=None,
            help='Seconds to sleep when idle (default: from settings)',
        )
        parser.add_argument(
            '--queue',
            action='append',
            dest='queues',
            default=None,
            help='Only consume this queue (repeatable)',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the worker.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        queue = register_consumers(
            JobQueue(poll_interval=options['poll_interval']),
        )
        if options['queues']:
            _restrict_queues(queue, options['queues'])

        recovered = recover_stale_jobs()
        if recovered:
            self.stdout.write(
                self.style.WARNING(f'Recovered {recovered} stale job(s)'),
            )

        if options['once']:
            processed = 0
            while queue.run_once() is not None:
                processed += 1
            self.stdout.write(
                self.style.SUCCESS(f'Processed {processed} job(s)'),
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                f'Worker consuming: {", ".join(queue.queue_names)}',
            ),
        )
        try:
            queue.run_forever()
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('Worker stopped.'))


def _restrict_queues(queue: JobQueue, queue_names: list[str]) -> None:
    unknown = set(queue_names) - set(queue.queue_names)
    if unknown:
        logger.warning('Ignoring unknown queues: %s', sorted(unknown))
    for queue_name in queue.queue_names:
        if queue_name not in queue_names:
            queue.unregister(queue_name)
