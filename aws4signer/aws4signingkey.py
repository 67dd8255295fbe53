"""
Provides AWS4SigningKey class for deriving Amazon Web Services Signature
Version 4 request-scoped signing keys.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import hmac
import hashlib
from datetime import datetime, timezone


class AWS4SigningKey:
    """
    AWS signing key, scoped to a date, region and service. Used to sign AWS
    authentication strings.

    The secret key is not stored in the object after instantiation.

    Methods:
    generate_key() -- Run the HMAC-SHA256 chain and return the key bytes.
    sign_sha256()  -- Generate SHA256 HMAC signature, encoding message to bytes
                      if required.

    Attributes:
    region   -- AWS region the key is scoped for
    service  -- AWS service the key is scoped for
    amz_date -- 8-digit YYYYMMDD date the key is scoped for
    scope    -- The credential scope string for this key, calculated from the
                above attributes.
    key      -- The signing key itself, raw bytes

    """

    def __init__(self, secret_key, region, service, date=None):
        """
        >>> AWS4SigningKey(secret_key, region, service[, date])

        secret_key -- This is your AWS secret access key
        region     -- The region you're connecting to, e.g. us-east-1
        service    -- The name of the service you're connecting to, e.g. s3
        date       -- Either an 8-digit date of the form YYYYMMDD or a full
                      YYYYMMDDTHHMMSSZ timestamp, only the first eight
                      characters are used. If date is not supplied the
                      current UTC date is used.

        None values are treated as empty strings.

        """
        self.region = region or ''
        self.service = service or ''
        if date is None:
            date = datetime.now(timezone.utc).strftime('%Y%m%d')
        self.amz_date = date[:8]
        self.scope = '{}/{}/{}/aws4_request'.format(
                                            self.amz_date,
                                            self.region,
                                            self.service)
        self.key = self.generate_key(secret_key, self.region,
                                     self.service, self.amz_date)

    @classmethod
    def generate_key(cls, secret_key, region, service, amz_date,
                     intermediate=False):
        """
        Generate the signing key as bytes.

        If intermediate is set to True, returns a 4-tuple containing the key
        and the intermediate keys:

        ( signing_key, date_key, region_key, service_key )

        Each intermediate key is the raw digest used as the MAC key of the
        next step.

        """
        init_key = ('AWS4' + (secret_key or '')).encode('utf-8')
        date_key = cls.sign_sha256(init_key, amz_date[:8])
        region_key = cls.sign_sha256(date_key, region or '')
        service_key = cls.sign_sha256(region_key, service or '')
        key = cls.sign_sha256(service_key, 'aws4_request')
        if intermediate:
            return (key, date_key, region_key, service_key)
        return key

    @staticmethod
    def sign_sha256(key, msg):
        """
        Generate an SHA256 HMAC, encoding msg to UTF-8 if not
        already encoded.

        key -- signing key. bytes.
        msg -- message to sign. str or bytes.

        """
        if isinstance(msg, str):
            msg = msg.encode('utf-8')
        return hmac.new(key, msg, hashlib.sha256).digest()

    def __repr__(self):
        return '<AWS4SigningKey scope={}>'.format(self.scope)
