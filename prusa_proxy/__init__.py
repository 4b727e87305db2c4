"""
Prusa Proxy
===========

Digest-auth REST proxy for PrusaLink 3D printers.

Usage:
    python -m prusa_proxy --config ./prusa.yml --port 31100

API Endpoints:
    GET  /                - Info page
    POST /pause           - Pause the job on {"ip": ...}
    POST /resume          - Resume the job on {"ip": ...}
    POST /stop            - Stop the job on {"ip": ...}
    POST /all/pause       - Pause every configured printer
    POST /all/resume      - Resume every configured printer
    POST /all/stop        - Stop every configured printer, last first
    GET  /metrics         - Prometheus printer state
"""

__version__ = '1.0.0'
