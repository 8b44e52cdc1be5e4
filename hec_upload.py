"""
Upload a file of newline-delimited events into Splunk via HEC (HTTP Event Collector).

The file is read in blocks and cut at record boundaries, so every request
carries whole events and stays under the HEC payload limit.

Settings are layered, highest priority first:
  command line > SPLUNK_HEC_* environment / .env > splunkutils.properties > defaults

Usage:
  python hec_upload.py --file events.log --token $SPLUNK_HEC_TOKEN --index main
  python hec_upload.py --file events.log --url https://splunk:8088/services/collector/raw/1.0

Exit codes:
  0  finished (a failed send is logged, not signalled)
  1  configuration error, nothing was sent
  2  bad options, or a payload over the HEC limit
"""

from __future__ import annotations

import argparse
from typing import List, Optional

import structlog

from shared.exceptions import (
    ConfigurationError,
    HECResponseError,
    HECTransportError,
    PayloadTooLargeError,
    RecordTooLargeError,
)
from shared.logger import LOG_FORMATS, setup_logging
from shared.utils import mask_token
from splunk_integration.config import DEFAULT_PROPERTIES_FILE, load_settings
from splunk_integration.hec_client import HECUploader
from splunk_integration.sink import LoggingResultSink

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload a file of events into Splunk HEC")
    parser.add_argument("--file", dest="path", default="", help="Path to a file of newline-delimited events")
    parser.add_argument("--url", dest="destination_url", help="Complete HEC endpoint URL (overrides protocol/host/port/endpoint)")
    parser.add_argument("--token", help="HEC token (or env SPLUNK_HEC_TOKEN)")
    parser.add_argument("--index", help="Override the token's default index")
    parser.add_argument("--source", help="Override the source metadata")
    parser.add_argument("--sourcetype", help="Override the sourcetype metadata")
    parser.add_argument(
        "--channel",
        help="HEC request channel. Default: random UUID per run.",
    )
    parser.add_argument(
        "--properties",
        default=DEFAULT_PROPERTIES_FILE,
        help=f"Properties file with hec-* settings (default: {DEFAULT_PROPERTIES_FILE})",
    )
    parser.add_argument("--block-size", type=int, help="Bytes read per chunk (default: 524288)")
    parser.add_argument(
        "--strict-records",
        action="store_true",
        default=None,
        help="Fail instead of splitting a record longer than the block size",
    )
    parser.add_argument(
        "--fail-on-http-error",
        action="store_true",
        default=None,
        help="Stop at the first chunk HEC answers with an error status",
    )
    parser.add_argument(
        "--no-verify",
        dest="verify",
        action="store_false",
        default=None,
        help="Disable TLS verification (useful for self-signed certs)",
    )
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR (default: INFO)")
    parser.add_argument("--log-format", choices=LOG_FORMATS, help="json or console (default: json)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or "INFO", args.log_format or "json")

    try:
        settings = load_settings(
            properties_file=args.properties,
            destination_url=args.destination_url,
            token=args.token,
            index=args.index,
            source=args.source,
            sourcetype=args.sourcetype,
            channel=args.channel,
            block_size=args.block_size,
            strict_records=args.strict_records,
            fail_on_http_error=args.fail_on_http_error,
            verify=args.verify,
            log_level=args.log_level,
            log_format=args.log_format,
        )
        setup_logging(settings.log_level, settings.log_format)
        if not settings.is_configured():
            raise ConfigurationError("Missing HEC token. Pass --token or set SPLUNK_HEC_TOKEN.")
        logger.info(
            "Settings resolved",
            url=settings.destination().url,
            token=mask_token(settings.token),
            path=args.path,
        )
        uploader = HECUploader(settings, sink=LoggingResultSink())
        result = uploader.send_file(args.path)
        logger.info("response", response=result.last_response)
    except ConfigurationError as e:
        logger.error("No valid input to process", error=str(e))
        return 1
    except (PayloadTooLargeError, RecordTooLargeError) as e:
        logger.error("Aborting transfer", error=str(e))
        return 2
    except (HECTransportError, HECResponseError) as e:
        logger.error("Error sending file", error=str(e))
    except OSError as e:
        logger.error("Error reading file", error=str(e))

    logger.info("HEC upload finished")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
