"""Backend-access services.  Each public coroutine takes the backend client first and returns a result envelope."""
