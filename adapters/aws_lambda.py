import base64
import binascii
import json
import logging

from analysis.translator import handle_analysis

logging.basicConfig(level=logging.INFO)

HEADERS = {"Content-Type": "application/json"}


def _method(event: dict):
    # REST API (v1) puts the verb at the top level, HTTP API (v2) under requestContext
    if event.get("httpMethod"):
        return event["httpMethod"]
    http = (event.get("requestContext") or {}).get("http") or {}
    return http.get("method")


def _body(event: dict):
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            return body
    return body


def lambda_handler(event, context):
    """API Gateway proxy entry point for the resume analysis endpoint."""
    status_code, payload = handle_analysis(_method(event), _body(event))
    return {
        "statusCode": status_code,
        "headers": dict(HEADERS),
        "body": json.dumps(payload),
    }
