"""
Backend script for the weekly stock recap email.
Reads every user's holdings and watchlist from Supabase, fetches a weekly market
snapshot once per unique ticker and emails each user a personalised digest.
"""
# Scheduled entry point, no arguments
import os
import sys
from datetime import datetime, timezone
from recap.config import load_settings
from recap.errors import ConfigError
from recap.logging import log_event
from recap.pipeline import build_pipeline

def main():
    """
    Main function orchestrates the recap job:
    - Validates configuration before any work begins
    - Runs the pipeline; ticker and send failures do not change the exit status
    """
    try:
        settings = load_settings()
    except ConfigError as e:
        log_event("FATAL", "Missing required environment variables", problems=e.problems)
        return 1
    log_event("INFO", "Startup marker", github_sha=os.getenv("GITHUB_SHA"), utc_now=str(datetime.now(timezone.utc)), provider=settings.market_data_provider, ticker_delay_ms=settings.ticker_delay_ms, lookback_days=settings.lookback_days)
    try:
        pipeline = build_pipeline(settings)
    except ConfigError as e:
        log_event("FATAL", "Could not initialise providers", problems=e.problems)
        return 1
    pipeline.run()
    return 0

if __name__ == "__main__":
    sys.exit(main())
