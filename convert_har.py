#!/usr/bin/env python3
"""
HAR to JMeter Converter

Generates an Apache JMeter test plan from a HAR capture using AI.

Usage:
    python convert_har.py --har output/linkedin_20251204_105022/requests.har
    python convert_har.py --har capture.har --provider google --name "Checkout flow" --output checkout.jmx
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from har_to_jmeter.config import Settings, configure_logging
from har_to_jmeter.errors import ConfigurationError
from har_to_jmeter.generator import JMXGenerator
from har_to_jmeter.models import AIProvider
from har_to_jmeter.parser import load_har_file

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Convert a HAR file into a JMeter test plan using AI',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python convert_har.py --har capture.har
  python convert_har.py --har capture.har --provider google --output plan.jmx --summary-file summary.json
        """
    )
    parser.add_argument(
        '--har',
        type=str,
        required=True,
        help='Path to the HAR file'
    )
    parser.add_argument(
        '--provider',
        type=str,
        choices=[p.value for p in AIProvider],
        default=AIProvider.OPENAI.value,
        help='LLM provider (default: openai)'
    )
    parser.add_argument(
        '--name',
        type=str,
        default='HAR Performance Test',
        help='Test plan name (default: "HAR Performance Test")'
    )
    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Output .jmx path (default: HAR path with .jmx suffix)'
    )
    parser.add_argument(
        '--summary-file',
        type=str,
        default=None,
        help='Optional path to write the request summary as JSON'
    )

    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1
    configure_logging(settings.log_level)

    har_path = Path(args.har).resolve()
    output_path = Path(args.output).resolve() if args.output else har_path.with_suffix('.jmx')

    logger.info("=" * 70)
    logger.info("HAR TO JMETER CONVERTER")
    logger.info("=" * 70)
    logger.info(f"HAR file: {har_path}")
    logger.info(f"Provider: {args.provider}")
    logger.info(f"Test plan will be saved to: {output_path}")

    try:
        har_data = load_har_file(har_path)

        generator = JMXGenerator(settings)
        result = generator.generate(
            har_data,
            ai_provider=args.provider,
            test_plan_name=args.name,
        )

        output_path.write_text(result.jmx_content, encoding='utf-8')

        if args.summary_file:
            summary_path = Path(args.summary_file).resolve()
            with open(summary_path, 'w', encoding='utf-8') as f:
                json.dump(result.summary.model_dump(by_alias=True), f, indent=2, ensure_ascii=False)
            logger.info(f"Summary saved to: {summary_path}")

        summary = result.summary
        avg = f"{summary.avg_response_time:.2f} ms" if summary.avg_response_time is not None else "n/a"
        print("\n" + "=" * 70)
        print("JMETER TEST PLAN GENERATED")
        print("=" * 70)
        print(f"Test plan: {result.metadata.test_plan_name}")
        print(f"Provider: {result.metadata.provider}")
        print(f"Total Requests: {summary.total_requests}")
        print(f"Domains: {', '.join(summary.unique_domains) or '-'}")
        print(f"Methods: {', '.join(summary.methods_used) or '-'}")
        print(f"Average Response Time: {avg}")
        print(f"\nSaved to: {output_path}")
        print("=" * 70)

        return 0

    except KeyboardInterrupt:
        logger.warning("\nConversion interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Conversion failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
