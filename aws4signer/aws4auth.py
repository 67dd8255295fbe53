"""
Provides AWS4Auth class for applying AWS4Signer signatures to requests made
with the Requests module.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import hashlib
import logging
from datetime import timezone
from email.utils import format_datetime
from urllib.parse import urlsplit

from requests.auth import AuthBase

from .aws4signer import AWS4Signer


log = logging.getLogger(__name__)


def http_date(moment):
    """Format a datetime as an RFC 1123 GMT date, naive values taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


class AWS4Auth(AuthBase):
    """
    Requests authentication class signing HTTP requests with an AWS4Signer.

    >>> import requests
    >>> from aws4signer import AWS4Auth, AWS4Signer
    >>> signer = AWS4Signer({'access_key': '<ACCESS KEY>',
    ...                      'secret_key': '<SECRET KEY>',
    ...                      'region': 'eu-west-1'})
    >>> response = requests.get('https://s3.amazonaws.com',
    ...                         auth=AWS4Auth(signer))

    Class attributes
    ----------------

    AWS4Auth.signer       -- the AWS4Signer used for every request
    AWS4Auth.service_name -- service override, or None to take the service
                             from the request host

    """

    def __init__(self, signer, service_name=None):
        if not isinstance(signer, AWS4Signer):
            msg = 'AWS4Auth() signer must be an AWS4Signer, {} given'.format(
                type(signer).__name__)
            raise TypeError(msg)
        self.signer = signer
        self.service_name = service_name
        AuthBase.__init__(self)

    def __call__(self, req):
        """
        Interface used by Requests module to apply authentication to HTTP
        requests.

        Add Host, Date and x-amz-content-sha256 headers where missing, then
        the Authorization header.

        If request body is not already encoded to bytes, encode to charset
        specified in Content-Type header, or UTF-8 if not specified.

        req -- Requests PreparedRequest object

        """
        if req.body is not None:
            self.encode_body(req)
        else:
            req.body = b''
        if not isinstance(req.body, bytes):
            raise TypeError('AWS4Auth cannot sign streaming request bodies')
        if 'host' not in req.headers:
            req.headers['Host'] = urlsplit(req.url).netloc
        if AWS4Signer.find_date_header(req.headers) is None:
            req.headers['Date'] = http_date(self.signer.clock())
        if 'x-amz-content-sha256' not in req.headers:
            content_hash = hashlib.sha256(req.body)
            req.headers['x-amz-content-sha256'] = content_hash.hexdigest()
        log.debug('Applying AWS4 auth to %s %s', req.method, req.url)
        signed = self.signer.sign(req.method, req.url, req.headers, req.body,
                                  service_name=self.service_name)
        req.headers['Authorization'] = signed['Authorization']
        return req

    @staticmethod
    def encode_body(req):
        """
        Encode body of request to bytes and update content-type if required.

        If the body of req is str then encode to the charset found in
        content-type header if present, otherwise UTF-8, or ASCII if
        content-type is application/x-www-form-urlencoded. If encoding to UTF-8
        then add charset to content-type. Modifies req directly, does not
        return a modified copy.

        req -- Requests PreparedRequest object

        """
        if isinstance(req.body, str):
            split = req.headers.get('content-type', 'text/plain').split(';')
            if len(split) == 2:
                ct, cs = split
                cs = cs.split('=')[1]
                req.body = req.body.encode(cs)
            else:
                ct = split[0]
                if (ct == 'application/x-www-form-urlencoded' or
                        'x-amz-' in ct):
                    req.body = req.body.encode()
                else:
                    req.body = req.body.encode('utf-8')
                    req.headers['content-type'] = ct + '; charset=utf-8'
