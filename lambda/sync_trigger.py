"""
Scheduled-function handler that triggers one sync job over HTTP.

Deploy to Lambda and attach one EventBridge rule per job, passing the job name in
the event, e.g. ``{"job": "sync-hazards"}``. Suggested schedules:

    sync-markets, sync-news, sync-weather   rate(5 minutes)
    sync-hazards, sync-storms               rate(10 minutes)
    sync-intel, sync-environmental          rate(15 minutes)
    sync-slow                               rate(1 hour)
    sync-fed                                cron(0 6 * * ? *)
"""

import json
import os
import urllib.error
import urllib.request
from typing import Any, Dict


def _reply(status: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {"statusCode": status, "body": json.dumps(body)}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    POST ``{API_URL}/functions/{job}`` with the bearer secret.

    Environment Variables:
        API_URL: Base URL of the sync service
        CRON_SECRET: Bearer token accepted by the service
        SYNC_JOB: Job to run when the event names none (default: run-all)
        SYNC_TIMEOUT: Request timeout in seconds (default: 300)
    """
    api_url = os.environ.get("API_URL")
    if not api_url:
        return _reply(500, {"success": False, "error": "API_URL environment variable not set"})

    job = (event or {}).get("job") or os.environ.get("SYNC_JOB", "run-all")
    timeout = int(os.environ.get("SYNC_TIMEOUT", "300"))
    endpoint = f"{api_url.rstrip('/')}/functions/{job}"

    headers = {"Content-Type": "application/json", "User-Agent": "SituationSyncTrigger/1.0"}
    secret = os.environ.get("CRON_SECRET")
    if secret:
        headers["Authorization"] = f"Bearer {secret}"

    request = urllib.request.Request(endpoint, data=b"{}", method="POST", headers=headers)

    try:
        print(f"Triggering {job} at: {endpoint}")
        with urllib.request.urlopen(request, timeout=timeout) as response:
            result = json.loads(response.read().decode("utf-8"))
        print(f"{job} finished: success={result.get('success')}")
        return _reply(200, {"success": bool(result.get("success")), "job": job, "result": result})

    except urllib.error.HTTPError as e:
        error_body = e.read().decode("utf-8") if e.fp else str(e)
        print(f"{job} request failed with HTTP {e.code}: {error_body}")
        return _reply(e.code, {"success": False, "job": job, "error": f"HTTP {e.code}: {error_body}"})

    except urllib.error.URLError as e:
        print(f"{job} request failed: {e}")
        return _reply(502, {"success": False, "job": job, "error": f"Connection error: {e}"})


# For local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1:
        os.environ["API_URL"] = sys.argv[1]
    job_arg = sys.argv[2] if len(sys.argv) > 2 else None

    print(json.dumps(lambda_handler({"job": job_arg} if job_arg else {}, None), indent=2))
