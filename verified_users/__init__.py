"""Read access to the verified users table.

Records are written by the verification website; this package only reads them.

Design goals:
- Keep dependencies minimal (stdlib + boto3).
- Build the DynamoDB client once, explicitly, and pass it around.
- Decode items into typed records instead of trusting their shape.
"""

__version__ = "0.1.0"
