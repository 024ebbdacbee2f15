"""
NEM12 Processor Lambda: converts uploaded NEM12 CSV files to SQL INSERT scripts.

Triggered by S3 object-created events, either directly or wrapped in SQS
messages. For every file it writes two objects to the output bucket:
  <OUTPUT_PREFIX><stem>.sql           INSERT statements, one per line
  <OUTPUT_PREFIX><stem>.summary.json  summary and line errors

Can also be invoked manually:
  aws lambda invoke --function-name nem12-processor \
    --payload '{"Records": [{"s3": {"bucket": {"name": "uploads"}, "object": {"key": "meter.csv"}}}]}' out.json
"""

import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit

from libs.nem12sql import FileValidationError, NEMProcessingError, ProcessingResult
from shared import (
    OUTPUT_BUCKET,
    OUTPUT_PREFIX,
    SQL_EXTENSION,
    SUMMARY_SUFFIX,
    NEM12FileValidator,
    NEMProcessor,
    S3FileSource,
)
from shared.sources import get_s3_client

logger = Logger(service="nem12-processor")
tracer = Tracer(service="nem12-processor")
metrics = Metrics(namespace="NEM12/SQL")


class FileOutcome(Enum):
    """Result status for one S3 object."""

    PROCESSED = "processed"
    SKIPPED = "skipped"  # Rejected by validation (not CSV, too large)
    FAILED = "failed"


def extract_s3_objects(event: dict[str, Any]) -> list[tuple[str, str]]:
    """
    Collect (bucket, decoded_key) pairs from an S3 or SQS-wrapped S3 event.

    Malformed records are logged and skipped.
    """
    objects = []

    for record in event.get("Records", []):
        try:
            s3_records = json.loads(record["body"]).get("Records", []) if "body" in record else [record]

            for s3_record in s3_records:
                bucket = s3_record["s3"]["bucket"]["name"]
                # Always decode key before using with boto3
                key = unquote(s3_record["s3"]["object"]["key"].replace("+", "%20"))
                objects.append((bucket, key))

        except (KeyError, TypeError, AttributeError, json.JSONDecodeError) as e:
            logger.error("Malformed event record", exc_info=True, extra={"error": str(e)})
            continue

    return objects


def output_keys(source_key: str, prefix: str = OUTPUT_PREFIX) -> tuple[str, str]:
    """Return (sql_key, summary_key) for a source object key."""
    stem = Path(source_key).stem
    return f"{prefix}{stem}{SQL_EXTENSION}", f"{prefix}{stem}{SUMMARY_SUFFIX}"


@tracer.capture_method
def write_outputs(
    result: ProcessingResult,
    source_key: str,
    bucket: str | None = None,
    prefix: str | None = None,
) -> str:
    """
    Upload the SQL script and JSON summary for one processed file.

    Returns:
        S3 key of the SQL script
    """
    bucket = bucket if bucket is not None else OUTPUT_BUCKET
    prefix = prefix if prefix is not None else OUTPUT_PREFIX
    sql_key, summary_key = output_keys(source_key, prefix)

    summary_doc = result.to_dict()
    del summary_doc["sqlStatements"]
    summary_doc["sourceKey"] = source_key
    summary_doc["sqlKey"] = sql_key

    s3 = get_s3_client()
    s3.put_object(
        Bucket=bucket,
        Key=sql_key,
        Body="\n".join(result.sql_statements).encode("utf-8"),
        ContentType="application/sql",
    )
    s3.put_object(
        Bucket=bucket,
        Key=summary_key,
        Body=json.dumps(summary_doc, indent=2).encode("utf-8"),
        ContentType="application/json",
    )

    logger.info(
        "Outputs uploaded",
        extra={"bucket": bucket, "sql_key": sql_key, "statements": len(result.sql_statements)},
    )
    return sql_key


@tracer.capture_method
def process_s3_object(bucket: str, key: str, processor: NEMProcessor) -> tuple[FileOutcome, dict[str, Any]]:
    """
    Convert one S3 object and upload its outputs.

    Returns:
        Tuple of (outcome, detail) where detail is safe to return from the handler
    """
    detail: dict[str, Any] = {"bucket": bucket, "key": key}

    try:
        result = asyncio.run(processor.process_file(S3FileSource(bucket, key, get_s3_client())))
    except FileValidationError as e:
        logger.warning("File rejected", extra={"bucket": bucket, "key": key, "reason": str(e)})
        detail["error"] = str(e)
        return FileOutcome.SKIPPED, detail
    except NEMProcessingError as e:
        logger.error("File processing failed", exc_info=True, extra={"bucket": bucket, "key": key, "error": str(e)})
        detail["error"] = str(e)
        return FileOutcome.FAILED, detail

    try:
        detail["sql_key"] = write_outputs(result, key)
    except Exception as e:
        logger.error("Output upload failed", exc_info=True, extra={"key": key, "error": str(e)})
        detail["error"] = f"Output upload failed: {e}"
        return FileOutcome.FAILED, detail

    metrics.add_metric(name="ReadingsConverted", unit=MetricUnit.Count, value=result.summary.unique_records)
    metrics.add_metric(name="DuplicatesFound", unit=MetricUnit.Count, value=result.summary.duplicates_found)
    metrics.add_metric(name="LineErrors", unit=MetricUnit.Count, value=len(result.errors))

    detail["summary"] = result.summary.to_dict()
    detail["errors"] = result.errors
    return FileOutcome.PROCESSED, detail


@tracer.capture_lambda_handler
@metrics.log_metrics(capture_cold_start_metric=True)
@logger.inject_lambda_context
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    processor = NEMProcessor(file_validator=NEM12FileValidator())
    counts = {outcome: 0 for outcome in FileOutcome}
    results = []

    for bucket, key in extract_s3_objects(event):
        logger.info("Processing file", extra={"bucket": bucket, "key": key})
        outcome, detail = process_s3_object(bucket, key, processor)
        counts[outcome] += 1
        results.append({"status": outcome.value, **detail})

    metrics.add_metric(name="FilesProcessed", unit=MetricUnit.Count, value=counts[FileOutcome.PROCESSED])
    metrics.add_metric(name="FilesSkipped", unit=MetricUnit.Count, value=counts[FileOutcome.SKIPPED])
    metrics.add_metric(name="FilesFailed", unit=MetricUnit.Count, value=counts[FileOutcome.FAILED])

    return {
        "statusCode": 200,
        "processed": counts[FileOutcome.PROCESSED],
        "skipped": counts[FileOutcome.SKIPPED],
        "failed": counts[FileOutcome.FAILED],
        "results": results,
    }
