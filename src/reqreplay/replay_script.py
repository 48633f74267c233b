"""
reqreplay Request Replay Script

Replays a single captured HTTP request, optionally with method, URL, header
and body overrides, and can print the raw request and response.

This module is self-contained (standard library plus requests) because the
generator copies its source verbatim into every generated script.
"""

import argparse
import http.client
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, TextIO

import requests

CONTENT_LENGTH = 'Content-Length'
CRLF = '\r\n'


@dataclass(frozen=True)
class RequestBaseline:
    """Captured request values fixed when the script was generated."""

    host: str
    url_path: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b''
    scheme: str = 'https'

    @property
    def url(self) -> str:
        """Default target URL built from scheme, host and path."""
        return f'{self.scheme}://{self.host}{self.url_path}'


@dataclass
class EffectiveRequest:
    """The baseline after runtime overrides have been applied."""

    method: str
    url: str
    headers: Dict[str, str]
    body: bytes

    @classmethod
    def from_baseline(cls, baseline: RequestBaseline) -> 'EffectiveRequest':
        """Start an effective request from an untouched copy of the baseline."""
        return cls(
            method=baseline.method,
            url=baseline.url,
            headers=dict(baseline.headers),
            body=baseline.body
        )


def parse_header_flag(flag: str) -> Tuple[str, str]:
    """
    Split a -H argument into name and value.

    The name is everything before the first ':' and the value is every
    space-separated token after the first one, so "X-Test: a b" gives
    ("X-Test", "a b") and "X-Test:1" gives ("X-Test", "").

    Args:
        flag: Raw "Name: Value" argument

    Returns:
        Tuple of (name, value)
    """
    return flag.split(':')[0], ' '.join(flag.split(' ')[1:])


def add_headers(headers: Dict[str, str], header_flags: List[str]) -> Dict[str, str]:
    """
    Merge -H additions into headers.

    Names are matched literally: an existing header keeps its position and
    takes the new value, unknown names are appended in flag order, and a later
    flag for the same name wins.

    Args:
        headers: Current headers
        header_flags: Raw -H arguments in command-line order

    Returns:
        New header mapping
    """
    extra_headers = dict(parse_header_flag(h) for h in header_flags)
    return {**headers, **extra_headers}


def remove_headers(headers: Dict[str, str], names: List[str]) -> Tuple[Dict[str, str], List[str]]:
    """
    Drop every header whose name matches one of names, ignoring case.

    Args:
        headers: Current headers
        names: Header names from -r flags

    Returns:
        Tuple of (remaining headers, names of the headers that were dropped)
    """
    remove = [n.lower() for n in names]
    kept = {n: v for n, v in headers.items() if n.lower() not in remove}
    dropped = [n for n in headers if n.lower() in remove]
    return kept, dropped


def replace_body(
    headers: Dict[str, str],
    body: bytes,
    dropped: List[str]
) -> Tuple[Dict[str, str], bytes]:
    """
    Install a new body and recompute Content-Length when one was dropped.

    Content-Length is re-added with the new body's byte length only when a
    Content-Length header was removed, either by the -r stage (reported via
    dropped) or by this stage's own filter. It is never synthesized otherwise.

    Args:
        headers: Headers after the removal stage
        body: New request body
        dropped: Header names dropped by the removal stage

    Returns:
        Tuple of (headers, body)
    """
    prev_len = len(headers)
    headers = {n: v for n, v in headers.items() if n.lower() != CONTENT_LENGTH.lower()}

    removed_by_flag = any(n.lower() == CONTENT_LENGTH.lower() for n in dropped)
    if len(headers) < prev_len or removed_by_flag:
        headers[CONTENT_LENGTH] = str(len(body))

    return headers, body


def build_effective_request(baseline: RequestBaseline, args: argparse.Namespace) -> EffectiveRequest:
    """
    Apply parsed command-line overrides to the baseline.

    Stages run in a fixed order: header additions, header removals, body
    replacement. Method and URL overrides are taken as given.

    Args:
        baseline: Captured request values
        args: Parsed arguments from build_parser()

    Returns:
        EffectiveRequest ready for dispatch
    """
    request = EffectiveRequest.from_baseline(baseline)

    if args.method is not None:
        request.method = args.method
    if args.url is not None:
        request.url = args.url

    headers = add_headers(request.headers, args.header)
    headers, dropped = remove_headers(headers, args.remove_header)

    body = request.body
    if args.body is not None:
        headers, body = replace_body(headers, args.body.encode('utf-8'), dropped)

    request.headers = headers
    request.body = body
    return request


def decode_body(body: bytes) -> str:
    """Decode a body one byte per character for display."""
    return body.decode('latin1', errors='replace')


def format_request(request: EffectiveRequest) -> str:
    """
    Render a request in raw wire-like form.

    The Host header is left out because the request line already carries the
    authority.

    Args:
        request: Effective request to render

    Returns:
        Request line, headers and (if any) body
    """
    lines = [f'{request.method.upper()} {request.url} HTTP/1.1']
    for name, value in request.headers.items():
        if name.lower() != 'host':
            lines.append(f'{name}: {value}')

    text = ''.join(line + CRLF for line in lines) + CRLF
    if request.body:
        text += decode_body(request.body) + '\n'
    return text


def format_response(response: requests.Response) -> str:
    """
    Render a response in raw wire-like form.

    Args:
        response: Completed response

    Returns:
        Status line, headers in received order and the full body
    """
    lines = [f'HTTP/1.1 {response.status_code} {response.reason}']
    for name, value in response_header_items(response):
        lines.append(f'{name}: {value}')

    text = ''.join(line + CRLF for line in lines) + CRLF
    body = response.raw.read(decode_content=False)
    return text + decode_body(body) + '\n'


def response_header_items(response: requests.Response) -> List[Tuple[str, str]]:
    """
    Response headers in received order, repeated headers kept separate.

    The parsed http.client message keeps the wire order. urllib3's header
    dict groups repeats under their first position, so it is only used when
    the original message isn't available.
    """
    raw = response.raw
    message = getattr(getattr(raw, '_original_response', None), 'msg', None)
    if isinstance(message, http.client.HTTPMessage):
        return list(message.items())

    raw_headers = getattr(raw, 'headers', None)
    if hasattr(raw_headers, 'iteritems'):
        return list(raw_headers.iteritems())
    return list(response.headers.items())


def send_request(request: EffectiveRequest) -> requests.Response:
    """
    Issue the request once.

    The session's default headers are cleared so only the effective headers
    (plus whatever the transport itself requires) are sent. The body is left
    unread and undecoded until the caller asks for it. No timeout, retries or
    TLS/redirect settings are applied.
    """
    with requests.Session() as session:
        session.headers.clear()
        return session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            stream=True
        )


def build_parser(
    baseline: RequestBaseline,
    prog: str = 'make_request.py',
    epilog: Optional[str] = None
) -> argparse.ArgumentParser:
    """Build the command-line parser for a replay script."""
    parser = argparse.ArgumentParser(
        prog=prog,
        description=f'Make a {baseline.method} request to {baseline.url}',
        epilog=epilog
    )

    parser.add_argument('-m', '--method', help='change the method of the request')
    parser.add_argument('-u', '--url', help='change the url of the request')
    parser.add_argument('-H', '--header', default=[], action='append',
                        help='add a header to the request. Format: "name: value"')
    parser.add_argument('-r', '--remove-header', default=[], action='append',
                        help='remove the specified header')
    parser.add_argument('-b', '--body', help='replace body')
    parser.add_argument('-q', '--print-request', action='store_true', default=False,
                        help='print raw request')
    parser.add_argument('-p', '--print-response', action='store_true', default=False,
                        help='print raw response')

    return parser


def main(
    baseline: RequestBaseline,
    argv: Optional[List[str]] = None,
    prog: str = 'make_request.py',
    epilog: Optional[str] = None,
    out: Optional[TextIO] = None
) -> int:
    """
    Replay the baseline request with overrides from argv.

    Transport errors raised by requests are not caught.

    Args:
        baseline: Captured request values
        argv: Command-line arguments (defaults to sys.argv[1:])
        prog: Program name shown in help output
        epilog: Help epilog
        out: Output stream (defaults to sys.stdout)

    Returns:
        Process exit code
    """
    out = out or sys.stdout
    args = build_parser(baseline, prog=prog, epilog=epilog).parse_args(argv)
    request = build_effective_request(baseline, args)

    if args.print_request:
        out.write(format_request(request))

    with send_request(request) as response:
        if args.print_response:
            out.write(format_response(response))
        else:
            out.write(f'Status: {response.status_code} {response.reason}\n')

    return 0
