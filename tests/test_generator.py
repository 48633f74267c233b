"""
Tests for replay script generation.

Tests that generated scripts embed the captured baseline exactly, compile
and run standalone, and are written with the configured name and mode.
"""

import io
import os
import sys
from unittest.mock import Mock, patch

import pytest
import requests
from urllib3._collections import HTTPHeaderDict

from reqreplay.config import GeneratorConfig
from reqreplay.generator import ScriptGenerator
from reqreplay.replay_script import RequestBaseline


@pytest.fixture
def baseline():
    """Baseline with values that break naive quoting."""
    return RequestBaseline(
        host='example.com',
        url_path="/search?q='''&x=\\n",
        method='POST',
        headers={
            'Host': 'example.com',
            'Accept': '*/*',
            'X-Quote': 'it\'s "quoted"',
            'Content-Length': '4',
        },
        body=b"'''\xff"
    )


def make_response(status=200, reason='OK'):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.raw = Mock(_original_response=None, headers=HTTPHeaderDict())
    response.raw.read.return_value = b''
    return response


def load_script(script, name='generated_replay'):
    """Execute generated script source and return its globals."""
    namespace = {'__name__': name}
    exec(compile(script, 'replay.py', 'exec'), namespace)
    return namespace


class TestRender:
    """Test ScriptGenerator.render()."""

    def test_script_starts_with_shebang(self, baseline):
        script = ScriptGenerator().render(baseline)
        assert script.startswith('#!/usr/bin/env python3\n')

    def test_baseline_round_trips(self, baseline):
        namespace = load_script(ScriptGenerator().render(baseline))
        embedded = namespace['BASELINE']

        assert embedded.host == baseline.host
        assert embedded.url_path == baseline.url_path
        assert embedded.method == baseline.method
        assert list(embedded.headers.items()) == list(baseline.headers.items())
        assert embedded.body == baseline.body
        assert embedded.url == baseline.url

    def test_script_does_not_import_package(self, baseline):
        script = ScriptGenerator().render(baseline)

        assert 'import reqreplay' not in script
        assert 'from reqreplay' not in script
        assert 'from .' not in script

    def test_empty_headers_and_body(self):
        bare = RequestBaseline(host='example.com', url_path='/', method='GET')
        namespace = load_script(ScriptGenerator().render(bare))

        assert namespace['BASELINE'].headers == {}
        assert namespace['BASELINE'].body == b''

    def test_help_text_from_config(self, baseline):
        config = GeneratorConfig(prog_name='replay_login.py', epilog='captured on staging')
        script = ScriptGenerator(config).render(baseline)

        assert "prog='replay_login.py'" in script
        assert "epilog='captured on staging'" in script

    def test_generated_main_replays_with_overrides(self, baseline):
        namespace = load_script(ScriptGenerator().render(baseline))
        out = io.StringIO()

        with patch('requests.Session.request', return_value=make_response()) as mock_request:
            namespace['main'](namespace['BASELINE'], ['-b', 'hello', '-r', 'x-quote'], out=out)

        kwargs = mock_request.call_args[1]
        assert kwargs['data'] == b'hello'
        assert kwargs['headers'] == {'Host': 'example.com', 'Accept': '*/*', 'Content-Length': '5'}
        assert out.getvalue() == 'Status: 200 OK\n'

    def test_entry_point_exits_zero(self, baseline):
        script = ScriptGenerator().render(baseline)

        with patch.object(sys, 'argv', ['replay.py']), \
                patch('requests.Session.request', return_value=make_response(500, 'Internal Server Error')), \
                patch('sys.stdout', new_callable=io.StringIO) as out:
            with pytest.raises(SystemExit) as exc_info:
                load_script(script, name='__main__')

        assert exc_info.value.code == 0
        assert out.getvalue() == 'Status: 500 Internal Server Error\n'

    def test_entry_point_transport_error_propagates(self, baseline):
        script = ScriptGenerator().render(baseline)

        with patch.object(sys, 'argv', ['replay.py']), \
                patch('requests.Session.request', side_effect=requests.ConnectionError('refused')):
            with pytest.raises(requests.ConnectionError):
                load_script(script, name='__main__')


class TestWrite:
    """Test ScriptGenerator.write()."""

    def test_default_filename(self, baseline, tmp_path):
        generator = ScriptGenerator(GeneratorConfig(output_dir=str(tmp_path / 'scripts')))

        path = generator.write(baseline, index=7)

        assert path == tmp_path / 'scripts' / 'request_7.py'
        assert path.read_text(encoding='utf-8') == generator.render(baseline)

    def test_filename_template(self, baseline, tmp_path):
        config = GeneratorConfig(output_dir=str(tmp_path), filename_template='{method}_{index}.py')

        path = ScriptGenerator(config).write(baseline, index=2)

        assert path.name == 'post_2.py'

    def test_explicit_output_path(self, baseline, tmp_path):
        target = tmp_path / 'nested' / 'replay.py'

        path = ScriptGenerator().write(baseline, output_path=str(target))

        assert path == target
        assert target.exists()

    @pytest.mark.skipif(sys.platform == 'win32', reason="POSIX permissions")
    def test_file_mode(self, baseline, tmp_path):
        path = ScriptGenerator(GeneratorConfig(output_dir=str(tmp_path))).write(baseline)
        assert os.stat(path).st_mode & 0o777 == 0o600

    def test_write_error_is_reraised(self, baseline, tmp_path, capsys):
        generator = ScriptGenerator()

        with patch('builtins.open', side_effect=PermissionError('denied')):
            with pytest.raises(PermissionError):
                generator.write(baseline, output_path=tmp_path / 'replay.py')

        assert 'Error writing' in capsys.readouterr().out
