"""
Provides AWS4HTTPXAuth class for applying AWS4Signer signatures to requests
made with httpx. Requires the httpx extra.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import hashlib

import httpx

from .aws4auth import http_date
from .aws4signer import AWS4Signer


class AWS4HTTPXAuth(httpx.Auth):
    """
    httpx authentication class signing requests with an AWS4Signer.

    >>> import httpx
    >>> from aws4signer import AWS4Signer
    >>> from aws4signer.httpx_auth import AWS4HTTPXAuth
    >>> auth = AWS4HTTPXAuth(AWS4Signer(config))
    >>> response = httpx.get('https://s3.amazonaws.com', auth=auth)

    Streaming bodies are read in full before signing.

    """

    requires_request_body = True

    def __init__(self, signer, service_name=None):
        if not isinstance(signer, AWS4Signer):
            msg = 'AWS4HTTPXAuth() signer must be an AWS4Signer, ' \
                  '{} given'.format(type(signer).__name__)
            raise TypeError(msg)
        self.signer = signer
        self.service_name = service_name

    def auth_flow(self, request):
        body = request.content
        if 'date' not in request.headers:
            request.headers['Date'] = http_date(self.signer.clock())
        if 'x-amz-content-sha256' not in request.headers:
            request.headers['x-amz-content-sha256'] = \
                hashlib.sha256(body).hexdigest()
        signed = self.signer.sign(request.method, str(request.url),
                                  dict(request.headers.items()), body,
                                  service_name=self.service_name)
        request.headers['Authorization'] = signed['Authorization']
        yield request
