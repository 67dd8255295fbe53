"""
Provides AWS4Signer class for computing Amazon Web Services Signature Version
4 Authorization headers for fully buffered HTTP requests.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import hashlib
import hmac
import logging
import posixpath
import re
from collections import namedtuple
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from urllib.parse import urlsplit, quote, unquote

from .aws4signingkey import AWS4SigningKey


log = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
TIMESTAMP_FORMAT = '%Y%m%dT%H%M%SZ'

QUOTED_RUN = re.compile(r'("[^"]*")')
WHITESPACE_RUN = re.compile(r'\s+')

# Keys checked, in order, before falling back to a case-insensitive scan
DATE_HEADER_KEYS = ('Date', 'DATE', 'date')


class Credentials(namedtuple('Credentials',
                             ['access_key', 'secret_key', 'region'])):
    """
    Immutable access key / secret key / region triple.

    No validation is performed, empty values just produce a signature the
    service will reject.

    """

    __slots__ = ()

    @classmethod
    def from_config(cls, config):
        """
        Build Credentials from a mapping. Only the access_key, secret_key and
        region keys are read, anything else is ignored. Missing keys become
        empty strings.

        """
        return cls(config.get('access_key') or '',
                   config.get('secret_key') or '',
                   config.get('region') or '')


SignRequest = namedtuple('SignRequest', ['method', 'uri', 'headers', 'body',
                                         'service', 'timestamp'])


def _default_clock():
    return datetime.now(timezone.utc)


class AWS4Signer:
    """
    Computes AWS Signature Version 4 Authorization headers.

    The signer holds only the credentials triple and its collaborators, so a
    single instance can sign requests for any service and be shared across
    threads.

    Basic usage
    -----------

    >>> from aws4signer import AWS4Signer
    >>> signer = AWS4Signer({'access_key': 'AKID', 'secret_key': 'SECRET',
    ...                      'region': 'eu-west-1'})
    >>> headers = signer.sign('GET', 'https://s3.amazonaws.com/',
    ...                       {'Host': 's3.amazonaws.com',
    ...                        'Date': 'Sun, 30 Aug 2015 12:36:00 GMT'},
    ...                       None)
    >>> headers['Authorization'].startswith(
    ...     'AWS4-HMAC-SHA256 Credential=AKID/20150830/eu-west-1/s3/')
    True

    Compatibility mode
    ------------------
    By default canonicalization is the simplified form: the query string is
    used verbatim, header values are only trimmed at the ends, every header is
    signed and headers are ordered by their original key. Pass strict=True to
    get full SigV4 canonicalization instead (encoded and sorted query string,
    collapsed header whitespace, headers merged and sorted by lower-cased
    name).

    Class attributes
    ----------------

    AWS4Signer.credentials -- the Credentials triple
    AWS4Signer.clock       -- callable returning the current datetime
    AWS4Signer.debug_sink  -- callable receiving diagnostic text
    AWS4Signer.strict      -- True for full SigV4 canonicalization

    """

    def __init__(self, config, clock=None, debug_sink=None, strict=False):
        """
        config     -- a Credentials instance, or a mapping with access_key,
                      secret_key and region keys
        clock      -- optional zero-argument callable returning a datetime,
                      used when a request has no Date header. Defaults to
                      the current UTC time.
        debug_sink -- optional one-argument callable receiving the
                      diagnostic output of sign(..., debug=True). Defaults
                      to print.
        strict     -- apply full SigV4 canonicalization rules

        """
        if isinstance(config, Credentials):
            self.credentials = config
        elif hasattr(config, 'get'):
            self.credentials = Credentials.from_config(config)
        else:
            msg = 'AWS4Signer() config must be a mapping or Credentials, ' \
                  '{} given'.format(type(config).__name__)
            raise TypeError(msg)
        self.clock = clock or _default_clock
        self.debug_sink = debug_sink or print
        self.strict = strict

    @property
    def access_key(self):
        return self.credentials.access_key

    @property
    def region(self):
        return self.credentials.region

    def sign(self, method, uri, headers, body, debug=False,
             service_name=None):
        """
        Return a copy of headers with an Authorization header added.

        method       -- HTTP method, any case
        uri          -- URL string or urllib.parse split/parse result
        headers      -- mapping of header names to values, not modified
        body         -- request body as bytes, str (UTF-8 encoded) or None
        debug        -- send the string to sign, canonical request and body
                        to the debug sink
        service_name -- service for the credential scope. Defaults to the
                        first dot-separated label of the URI host.

        An unparseable Date header raises the date parser's error.

        """
        if headers is None:
            headers = {}
        sreq = self.build_request(method, uri, headers, body, service_name)
        log.debug('Signing %s request to %s for service %s at %s',
                  sreq.method, sreq.uri.hostname, sreq.service,
                  sreq.timestamp)
        cano_headers, signed_headers = self.get_canonical_headers(
            sreq.headers, strict=self.strict)
        cano_req = self.get_canonical_request(sreq, cano_headers,
                                              signed_headers,
                                              strict=self.strict)
        scope = self.get_credential_scope(sreq.timestamp, self.region,
                                          sreq.service)
        sig_string = self.get_sig_string(sreq.timestamp, scope, cano_req)
        if debug:
            self.debug_logs(sig_string, cano_req, sreq.body)
        key = AWS4SigningKey(self.credentials.secret_key, self.region,
                             sreq.service, sreq.timestamp)
        signature = self.get_signature(key.key, sig_string)
        signed = headers.copy()
        for hdr in [h for h in signed if h.lower() == 'authorization']:
            del signed[hdr]
        signed['Authorization'] = self.get_authorization(
            self.access_key, scope, signed_headers, signature)
        return signed

    def build_request(self, method, uri, headers, body, service_name=None):
        """
        Collect the per-call inputs into a SignRequest, resolving the
        service and the timestamp.

        """
        if isinstance(uri, str):
            uri = urlsplit(uri)
        if body is None:
            body = b''
        elif isinstance(body, str):
            body = body.encode('utf-8')
        service = service_name or self.derive_service(uri)
        timestamp = self.get_timestamp(headers, self.clock)
        hdrs = [(hdr, val) for hdr, val in headers.items()
                if hdr.lower() != 'authorization']
        return SignRequest(method.upper(), uri, hdrs, body, service,
                           timestamp)

    @staticmethod
    def derive_service(uri):
        """
        Return the first dot-separated label of the URI host, e.g. s3 for
        s3.amazonaws.com.

        """
        if isinstance(uri, str):
            uri = urlsplit(uri)
        return uri.hostname.split('.', 1)[0]

    @staticmethod
    def find_date_header(headers):
        """
        Return the value of the Date header, matched case-insensitively, or
        None. Date, DATE and date are tried first, then any other casing in
        iteration order.

        """
        for key in DATE_HEADER_KEYS:
            if key in headers:
                return headers[key]
        for key, val in headers.items():
            if key.lower() == 'date':
                return val
        return None

    @classmethod
    def get_timestamp(cls, headers, clock=_default_clock):
        """
        Return the request timestamp in ISO 8601 basic format,
        YYYYMMDDTHHMMSSZ, always UTC.

        Taken from the Date header when present, otherwise from clock().

        """
        date_header = cls.find_date_header(headers)
        if date_header is not None:
            moment = parsedate_to_datetime(date_header)
        else:
            moment = clock()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)

    @classmethod
    def get_canonical_request(cls, sreq, cano_headers, signed_headers,
                              strict=False):
        """
        Create the Canonical Request string.

        sreq           -- SignRequest for the request being signed
        cano_headers   -- Canonical Headers section of Canonical Request, as
                          returned by get_canonical_headers()
        signed_headers -- Signed Headers, as returned by
                          get_canonical_headers()

        """
        path = cls.get_canonical_path(sreq.uri.path, strict=strict)
        qs = cls.get_canonical_querystring(sreq.uri.query, strict=strict)
        payload_hash = hashlib.sha256(sreq.body).hexdigest()
        req_parts = [sreq.method, path, qs, cano_headers,
                     signed_headers, payload_hash]
        return '\n'.join(req_parts)

    @classmethod
    def get_canonical_headers(cls, headers, strict=False):
        """
        Generate the Canonical Headers section of the Canonical Request.

        Return the Canonical Headers and the Signed Headers strs as a tuple
        (canonical_headers, signed_headers).

        headers -- mapping or iterable of (name, value) pairs. Every header
                   is signed.

        In the default mode each header becomes one lowercase-name:value
        line, values trimmed at both ends, ordered by the original header
        name. Names that only differ in case therefore each keep their own
        line. In strict mode values sharing a lower-cased name are merged
        into one comma-joined line and internal whitespace is collapsed.

        """
        if hasattr(headers, 'items'):
            headers = headers.items()
        if not strict:
            items = sorted(headers, key=lambda item: item[0])
            cano_headers = ''.join('{}:{}\n'.format(hdr.lower(),
                                                    str(val).strip())
                                   for hdr, val in items)
            signed_headers = ';'.join(hdr.lower() for hdr, _ in items)
            return (cano_headers, signed_headers)

        cano_headers_dict = {}
        for hdr, val in headers:
            hdr = hdr.strip().lower()
            val = cls.amz_norm_whitespace(str(val)).strip()
            cano_headers_dict.setdefault(hdr, []).append(val)
        cano_headers = ''
        signed_headers_list = []
        for hdr in sorted(cano_headers_dict):
            val = ','.join(cano_headers_dict[hdr])
            cano_headers += '{}:{}\n'.format(hdr, val)
            signed_headers_list.append(hdr)
        return (cano_headers, ';'.join(signed_headers_list))

    @staticmethod
    def get_credential_scope(timestamp, region, service):
        return '/'.join([timestamp[:8], region, service, 'aws4_request'])

    @staticmethod
    def get_sig_string(timestamp, scope, cano_req):
        """
        Generate the string to sign for the request.

        timestamp -- YYYYMMDDTHHMMSSZ request timestamp
        scope     -- credential scope, as returned by get_credential_scope()
        cano_req  -- The Canonical Request, as returned by
                     get_canonical_request()

        """
        hsh = hashlib.sha256(cano_req.encode('utf-8'))
        sig_items = [ALGORITHM, timestamp, scope, hsh.hexdigest()]
        return '\n'.join(sig_items)

    @staticmethod
    def get_signature(key, sig_string):
        """Lower-case hex HMAC-SHA256 of the string to sign."""
        return hmac.new(key, sig_string.encode('utf-8'),
                        hashlib.sha256).hexdigest()

    @staticmethod
    def get_authorization(access_key, scope, signed_headers, signature):
        auth_str = '{} '.format(ALGORITHM)
        auth_str += 'Credential={}/{}, '.format(access_key, scope)
        auth_str += 'SignedHeaders={}, '.format(signed_headers)
        auth_str += 'Signature={}'.format(signature)
        return auth_str

    @staticmethod
    def get_canonical_path(path, strict=False):
        """
        Generate the canonical path.

        . and .. segments are resolved and runs of / collapsed. An empty path
        becomes /. A trailing / is dropped unless strict is set.

        path -- request path

        """
        if not path:
            return '/'
        fixed_path = posixpath.normpath(path)
        fixed_path = re.sub('/+', '/', fixed_path)
        if fixed_path == '.':
            fixed_path = '/'
        if strict and path.endswith('/') and not fixed_path.endswith('/'):
            fixed_path += '/'
        return fixed_path

    @classmethod
    def get_canonical_querystring(cls, qs, strict=False):
        """
        Return the query string verbatim, or percent-encoded and sorted as
        full SigV4 requires when strict is set.

        """
        qs = qs or ''
        if not strict:
            return qs
        return cls.amz_cano_querystring(qs)

    @staticmethod
    def amz_cano_querystring(qs):
        """
        Parse and format querystring as per AWS4 auth requirements.

        Each name and value is decoded on its own and re-encoded, so encoded
        & and = stay inside the value. Parameters are sorted by name, then
        by value.

        qs -- querystring

        """
        safe_qs_unresvd = '-_.~'
        params = []
        for pair in qs.split('&'):
            if not pair:
                continue
            name, _, val = pair.partition('=')
            params.append((quote(unquote(name), safe=safe_qs_unresvd),
                           quote(unquote(val), safe=safe_qs_unresvd)))
        return '&'.join('='.join(param) for param in sorted(params))

    @staticmethod
    def amz_norm_whitespace(text):
        """
        Replace runs of whitespace with a single space.

        Text enclosed in a balanced pair of double quotes is left as is, an
        unmatched quote is treated as ordinary text.

        """
        return ''.join(part if QUOTED_RUN.fullmatch(part)
                       else WHITESPACE_RUN.sub(' ', part)
                       for part in QUOTED_RUN.split(text))

    def debug_logs(self, sig_string, cano_req, body):
        """Write the three diagnostic blocks to the debug sink."""
        if isinstance(body, bytes):
            body = body.decode('utf-8', 'replace')
        self.debug_sink('\n ######  String to sign: \n')
        self.debug_sink(sig_string)
        self.debug_sink('\n ######  Canonical request: \n')
        self.debug_sink(cano_req)
        self.debug_sink('\n ######  Body: \n')
        self.debug_sink(body)
