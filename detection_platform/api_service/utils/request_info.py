"""
Client metadata extraction for session bookkeeping.
"""
from typing import Optional
from fastapi import Request
from pydantic import BaseModel


class ClientInfo(BaseModel):
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def client_info_from_request(request: Request) -> ClientInfo:
    """
    Build ClientInfo from a FastAPI Request.

    Takes the socket peer address, falling back to the first X-Forwarded-For
    entry when the peer is unknown (proxy/load balancer scenarios).
    """
    ip_address = None
    if request.client:
        ip_address = request.client.host

    if not ip_address and request.headers.get("x-forwarded-for"):
        # X-Forwarded-For can contain multiple IPs, take the first one
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    # sessions.ip_address is varchar(45)
    if ip_address:
        ip_address = ip_address[:45]

    return ClientInfo(ip_address=ip_address, user_agent=request.headers.get("user-agent"))
