"""
Amazon Web Services Signature Version 4 header signing for Python.

Features
--------
* Authorization header computation for any SigV4 service, from the request
  method, URL, headers and body
* Deterministic output: the same inputs and timestamp always produce the same
  headers
* Generation of scoped signing keys
* Authentication adapters for Requests_ and httpx

.. _Requests: https://github.com/psf/requests

Installation
------------
Install via pip:

.. code-block:: bash

    $ pip install aws4signer

For the httpx adapter:

.. code-block:: bash

    $ pip install aws4signer[httpx]

Basic usage
-----------
.. code-block:: python

    >>> from aws4signer import AWS4Signer
    >>> signer = AWS4Signer({'access_key': '<ACCESS KEY>',
    ...                      'secret_key': '<SECRET KEY>',
    ...                      'region': 'us-east-1'})
    >>> headers = {'Host': 's3.amazonaws.com',
    ...            'Date': 'Sun, 30 Aug 2015 12:36:00 GMT'}
    >>> signed = signer.sign('GET', 'https://s3.amazonaws.com/', headers, None)

``signed`` is a copy of ``headers`` with an ``Authorization`` entry added;
``headers`` itself is left untouched. Every supplied header is signed, so
send exactly the returned headers.

``AWS4Signer`` objects
----------------------
``AWS4Signer(config, clock=None, debug_sink=None, strict=False)``

``config`` - a mapping with ``access_key``, ``secret_key`` and ``region``
keys, or a ``Credentials`` instance. Other keys are ignored; missing keys are
treated as empty strings and will simply produce a signature the service
rejects.

``clock`` - callable returning a ``datetime``, used when the request carries
no ``Date`` header. Defaults to the current UTC time.

``debug_sink`` - callable receiving the diagnostic output produced by
``sign(..., debug=True)``: the string to sign, the canonical request and the
body. Defaults to ``print``.

``strict`` - by default canonicalization uses the query string verbatim,
only trims header values at the ends and orders headers by their original
name. ``strict=True`` applies full SigV4 rules instead.

``sign(method, uri, headers, body, debug=False, service_name=None)``

The service defaults to the first label of the URI host, e.g. ``s3`` for
``s3.amazonaws.com``. The timestamp comes from the ``Date`` header when
present, otherwise from ``clock``. An unparseable ``Date`` header raises.

Requests
--------
.. code-block:: python

    >>> import requests
    >>> from aws4signer import AWS4Auth
    >>> response = requests.get('https://s3.amazonaws.com',
    ...                         auth=AWS4Auth(signer))

``AWS4Auth`` adds ``Host``, ``Date`` and ``x-amz-content-sha256`` headers
where missing before signing.

Multi-threading / processing
----------------------------
``AWS4Signer`` instances keep no per-request state and can be shared across
threads.

Unsupported features
--------------------
* Presigned URLs
* Chunked / streaming payload signing
* Credential lookup (environment, instance profile, STS)

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from .aws4signer import AWS4Signer, Credentials, SignRequest
from .aws4signingkey import AWS4SigningKey
from .aws4auth import AWS4Auth

__version__ = '0.1.0'
