#!/usr/bin/env python3
"""
MapReduce CLI
Runs the identity MapReduce pipeline over one input file:

    threadmr <input-path> <mapper-count> <reducer-count>
"""

import argparse
import logging
import sys
import uuid
from dataclasses import replace

from threadmr.client.monitoring import format_job_summary
from threadmr.common.config import PipelineConfig
from threadmr.common.errors import MapReduceError
from threadmr.coordinator.job_manager import JobManager

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


class UsageParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors on standard output"""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"{self.prog}: error: {message}")
        sys.exit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageParser(
        prog='threadmr',
        description='Run a multi-threaded MapReduce job over a text file',
        epilog='Example: %(prog)s input.txt 4 2'
    )
    parser.add_argument('input_path', help='Newline-delimited input file')
    parser.add_argument('num_map_tasks', type=int, help='Number of mappers (sections)')
    parser.add_argument('num_reduce_tasks', type=int, help='Number of reducers (output files)')
    parser.add_argument('--output-dir', help='Directory for output_<index>.txt files '
                                             '(default: $THREADMR_OUTPUT_DIR or .)')
    parser.add_argument('--metrics-file', help='Write job metrics as JSON to this file')
    parser.add_argument('--log-level', help='Logging level (default: $THREADMR_LOG_LEVEL or INFO)')
    parser.add_argument('--quiet', action='store_true', help='Only log warnings and errors')
    return parser


def run(args) -> int:
    """Run one job and report the outcome"""
    try:
        config = PipelineConfig.from_env()
        overrides = {}
        if args.output_dir:
            overrides['output_dir'] = args.output_dir
        if args.log_level:
            overrides['log_level'] = args.log_level
        config = replace(config, **overrides)
    except MapReduceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED

    logging.basicConfig(
        level=logging.WARNING if args.quiet else config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    manager = JobManager(config)
    job_id = str(uuid.uuid4())

    try:
        job = manager.run_job(args.input_path, args.num_map_tasks, args.num_reduce_tasks,
                              job_id=job_id)
    except MapReduceError as e:
        print(f"Error: {e}", file=sys.stderr)
        job = manager.get_job(job_id)
        if job is not None and not args.quiet:
            for line in format_job_summary(job):
                print(line, file=sys.stderr)
        return EXIT_FAILED

    if args.metrics_file:
        try:
            job.metrics.save_to_file(args.metrics_file)
        except OSError as e:
            print(f"Error writing metrics to {args.metrics_file}: {e}", file=sys.stderr)
            return EXIT_FAILED

    if not args.quiet:
        print("✓ Job completed successfully!")
        for line in format_job_summary(job):
            print(line)
    return EXIT_OK


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    return run(args)


if __name__ == '__main__':
    sys.exit(main())
