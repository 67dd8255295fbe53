#!/usr/bin/env python
# coding: utf-8

import unittest

from requests.structures import CaseInsensitiveDict

from aws4signer import AWS4Signer


def cano(headers, strict=False):
    return AWS4Signer.get_canonical_headers(headers, strict=strict)


class AWS4Signer_Header_Test(unittest.TestCase):

    def test_headers_amz_example(self):
        """
        Using example from:
        http://docs.aws.amazon.com/general/latest/gr/sigv4-create-canonical-request.html

        Only leading and trailing whitespace is trimmed.

        """
        hdr_text = [
            'host:iam.amazonaws.com',
            'Content-type:application/x-www-form-urlencoded; charset=utf-8',
            'My-header1:    a   b   c ',
            'x-amz-date:20120228T030031Z',
            'My-Header2:    "a   b   c"']
        headers = dict([item.split(':') for item in hdr_text])
        cano_headers, signed_headers = cano(headers)
        expected = [
            'content-type:application/x-www-form-urlencoded; charset=utf-8',
            'my-header2:"a   b   c"',
            'my-header1:a   b   c',
            'host:iam.amazonaws.com',
            'x-amz-date:20120228T030031Z']
        self.assertEqual(cano_headers, '\n'.join(expected) + '\n')
        expected = 'content-type;my-header2;my-header1;host;x-amz-date'
        self.assertEqual(signed_headers, expected)

    def test_headers_amz_example_strict(self):
        hdr_text = [
            'host:iam.amazonaws.com',
            'Content-type:application/x-www-form-urlencoded; charset=utf-8',
            'My-header1:    a   b   c ',
            'x-amz-date:20120228T030031Z',
            'My-Header2:    "a   b   c"']
        headers = dict([item.split(':') for item in hdr_text])
        cano_headers, signed_headers = cano(headers, strict=True)
        expected = [
            'content-type:application/x-www-form-urlencoded; charset=utf-8',
            'host:iam.amazonaws.com',
            'my-header1:a b c',
            'my-header2:"a   b   c"',
            'x-amz-date:20120228T030031Z']
        self.assertEqual(cano_headers, '\n'.join(expected) + '\n')
        expected = 'content-type;host;my-header1;my-header2;x-amz-date'
        self.assertEqual(signed_headers, expected)

    def test_sorted_by_original_key(self):
        headers = {'b-header': '1', 'A-Header': '2', 'X-Amz': '3'}
        cano_headers, signed_headers = cano(headers)
        self.assertEqual(cano_headers, 'a-header:2\nx-amz:3\nb-header:1\n')
        self.assertEqual(signed_headers, 'a-header;x-amz;b-header')

    def test_duplicate_headers(self):
        """
        Names differing only in case keep their own lines, ordered by the
        original name. Strict mode merges them.

        """
        headers = {'zoo': 'foobar',
                   'ZOO': 'zoobar',
                   'host': 'dummy'}
        self.assertEqual(cano(headers),
                         ('zoo:zoobar\nhost:dummy\nzoo:foobar\n',
                          'zoo;host;zoo'))
        self.assertEqual(cano(headers, strict=True),
                         ('host:dummy\nzoo:foobar,zoobar\n', 'host;zoo'))

    def test_strict_unbalanced_quote(self):
        headers = {'X-Note': '  say   "hi  '}
        self.assertEqual(cano(headers), ('x-note:say   "hi\n', 'x-note'))
        self.assertEqual(cano(headers, strict=True),
                         ('x-note:say "hi\n', 'x-note'))

    def test_strict_quoted_runs_kept(self):
        headers = {'X-Note': 'a   "b   c"   d  "e'}
        self.assertEqual(cano(headers, strict=True),
                         ('x-note:a "b   c" d "e\n', 'x-note'))

    def test_strict_duplicate_values_keep_order(self):
        headers = [('X-Dup', 'zeta'), ('Host', 'h'), ('x-dup', 'alpha'),
                   ('X-DUP', 'mid')]
        self.assertEqual(cano(headers, strict=True),
                         ('host:h\nx-dup:zeta,alpha,mid\n', 'host;x-dup'))

    def test_case_normalization(self):
        lower = cano({'x-amz-meta-a': 'v'})
        upper = cano({'X-AMZ-META-A': 'v'})
        mixed = cano({'X-Amz-Meta-A': 'v'})
        self.assertEqual(lower, upper)
        self.assertEqual(upper, mixed)

    def test_pairs_accepted(self):
        pairs = [('Host', 'h'), ('Accept', '*/*')]
        self.assertEqual(cano(pairs), cano(dict(pairs)))

    def test_non_str_values(self):
        self.assertEqual(cano({'Content-Length': 35}),
                         ('content-length:35\n', 'content-length'))

    def test_case_insensitive_dict(self):
        headers = CaseInsensitiveDict()
        headers['Host'] = 'example.amazonaws.com'
        headers['X-Amz-Date'] = '20150830T123600Z'
        self.assertEqual(
            cano(headers),
            ('host:example.amazonaws.com\nx-amz-date:20150830T123600Z\n',
             'host;x-amz-date'))

    def test_sign_case_insensitive_dict(self):
        headers = CaseInsensitiveDict()
        headers['Host'] = 'example.amazonaws.com'
        headers['date'] = 'Sun, 30 Aug 2015 12:36:00 GMT'
        headers['AUTHORIZATION'] = 'stale'
        signer = AWS4Signer({'access_key': 'a', 'secret_key': 's',
                             'region': 'r'})
        signed = signer.sign('GET', 'https://example.amazonaws.com/',
                             headers, None)
        self.assertIsInstance(signed, CaseInsensitiveDict)
        self.assertEqual(headers['authorization'], 'stale')
        self.assertNotEqual(signed['authorization'], 'stale')
        self.assertIn('Authorization', list(signed))
        self.assertNotIn('AUTHORIZATION', list(signed))
        self.assertIn('SignedHeaders=host;date, ', signed['Authorization'])


if __name__ == '__main__':
    unittest.main()
