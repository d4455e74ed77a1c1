"""
Demo Manager - Writes a sample telemetry session.

The sample exercises every graph rule: a preflight and login request pair
to the same host (Related), clicks and key presses followed by requests
(Triggered), an error event, a request to a second host, a request with
an unparsable URL (dropped), and gaps longer than the causal window.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

API = "https://api.example.com/api/v1"


class DemoManager:
    """
    Manages the creation of the demo log.
    """

    SAMPLE_LOGS: List[Dict[str, Any]] = [
        {
            "type": "click",
            "data": {"tag": "BUTTON", "id": "login", "class": "btn btn-primary", "text": "Sign in"},
            "timestamp": "2025-05-19T10:06:26.000Z",
            "receivedAt": "2025-05-19T10:06:26.011Z",
        },
        {
            "type": "keydown",
            "data": {"key": "Enter", "target": "INPUT#password"},
            "timestamp": "2025-05-19T10:06:27.000Z",
            "receivedAt": "2025-05-19T10:06:27.009Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": f"{API}/users/login",
                "method": "OPTIONS",
                "status": 204,
                "statusText": "No Content",
                "mimeType": "x-unknown",
                "time": 120.4,
            },
            "timestamp": "2025-05-19T10:06:28.122Z",
            "receivedAt": "2025-05-19T10:06:28.130Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": f"{API}/users/login",
                "method": "POST",
                "status": 404,
                "statusText": "Not Found",
                "mimeType": "application/json",
                "postData": '{"email":"demo@example.com"}',
                "responseBody": '{"success":false,"error":"User not found"}',
                "time": 310.2,
            },
            "timestamp": "2025-05-19T10:06:28.500Z",
            "receivedAt": "2025-05-19T10:06:28.514Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": f"{API}/movies/popular",
                "method": "GET",
                "status": 200,
                "statusText": "OK",
                "mimeType": "application/json",
                "time": 450.8,
            },
            "timestamp": "2025-05-19T10:06:29.500Z",
            "receivedAt": "2025-05-19T10:06:29.512Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": "https://cdn.example.com/posters/1.jpg",
                "method": "GET",
                "status": 200,
                "mimeType": "image/jpeg",
                "time": 80.0,
            },
            "timestamp": "2025-05-19T10:06:30.100Z",
            "receivedAt": "2025-05-19T10:06:30.104Z",
        },
        {
            "type": "click",
            "data": {"tag": "DIV", "id": "movie-1", "class": "movie-card", "text": "The Example"},
            "timestamp": "2025-05-19T10:06:31.000Z",
            "receivedAt": "2025-05-19T10:06:31.010Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": f"{API}/movies/1/details",
                "method": "GET",
                "status": 200,
                "mimeType": "application/json",
                "time": 220.5,
            },
            "timestamp": "2025-05-19T10:06:31.500Z",
            "receivedAt": "2025-05-19T10:06:31.507Z",
        },
        {
            "type": "error",
            "data": {
                "message": "Failed to load image",
                "source": "https://cdn.example.com/posters/2.jpg",
                "stack": "Error: Failed to load image\n    at Image.onerror (app.js:42:13)",
            },
            "timestamp": "2025-05-19T10:06:32.000Z",
            "receivedAt": "2025-05-19T10:06:32.004Z",
        },
        {
            "type": "network-request",
            "data": {"url": "not a url", "method": "GET", "status": 0},
            "timestamp": "2025-05-19T10:06:32.400Z",
            "receivedAt": "2025-05-19T10:06:32.405Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": f"{API}/movies/1/similar",
                "method": "GET",
                "status": 200,
                "mimeType": "application/json",
                "time": 380.15,
            },
            "timestamp": "2025-05-19T10:06:33.500Z",
            "receivedAt": "2025-05-19T10:06:33.514Z",
        },
        {
            "type": "click",
            "data": {"tag": "BUTTON", "id": "addToWatchlist", "class": "btn btn-secondary", "text": "Add to Watchlist"},
            "timestamp": "2025-05-19T10:06:35.000Z",
            "receivedAt": "2025-05-19T10:06:35.010Z",
        },
        {
            "type": "network-request",
            "data": {
                "url": f"{API}/users/watchlist/add",
                "method": "POST",
                "status": 401,
                "statusText": "Unauthorized",
                "mimeType": "application/json",
                "postData": '{"movieId":1}',
                "responseBody": '{"success":false,"error":"User not authenticated"}',
                "time": 250.35,
            },
            "timestamp": "2025-05-19T10:06:35.500Z",
            "receivedAt": "2025-05-19T10:06:35.514Z",
        },
        {
            "type": "scroll",
            "data": {"x": 0, "y": 640},
            "timestamp": "2025-05-19T10:06:38.000Z",
            "receivedAt": "2025-05-19T10:06:38.002Z",
        },
    ]

    def __init__(self, root_dir: Path):
        self.root_dir = root_dir

    def provision(self) -> Path:
        """
        Write the sample log to disk.

        Returns:
            Path: The path to the created log file.
        """
        demo_dir = self.root_dir / "replaygraph-demo"
        demo_dir.mkdir(parents=True, exist_ok=True)

        log_path = demo_dir / "telemetry.json"
        log_path.write_text(json.dumps(self.SAMPLE_LOGS, indent=2))
        logger.debug(f"Wrote {len(self.SAMPLE_LOGS)} sample events to {log_path}")
        return log_path
