from .poller import poll, poll_with_retries

__all__ = ["poll", "poll_with_retries"]
