"""
Tests for path collection.

Tests cover:
- Key relativization against a prefix or the working directory
- Recursive directory walks, including empty directories
- Deterministic results across repeated runs
- Duplicate keys (last one wins, with a warning)
- Errors for missing paths and paths outside the prefix
- Closing opened files when collection fails
- Response files
"""

import builtins
import os
from pathlib import Path

import pytest

from bindata.collector import (
    FileEntry,
    close_all,
    collect,
    expand_response_files,
    parse_response_file,
    relative_key,
)
from bindata.errors import PathOutsidePrefixError


def make_tree(base: Path, files: dict) -> None:
    for rel, data in files.items():
        path = base / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


class TestRelativeKey:
    """Tests for relative_key."""

    def test_with_prefix(self):
        assert relative_key('/a/b/c/d.txt', '/a/b') == 'c/d.txt'

    def test_empty_prefix_uses_cwd(self, isolated_env):
        (isolated_env / 'c').mkdir()
        target = isolated_env / 'c' / 'd.txt'
        assert relative_key(str(target)) == 'c/d.txt'
        assert relative_key(str(target), '') == 'c/d.txt'

    def test_relative_path_and_prefix(self):
        assert relative_key('static/css/site.css', 'static') == 'css/site.css'

    def test_plain_relative_path(self):
        assert relative_key('hello.go') == 'hello.go'

    def test_outside_prefix_raises(self):
        with pytest.raises(PathOutsidePrefixError) as exc_info:
            relative_key('/a/x.txt', '/a/b')
        assert isinstance(exc_info.value, OSError)
        assert exc_info.value.path == '/a/x.txt'

    def test_parent_of_cwd_raises(self):
        with pytest.raises(PathOutsidePrefixError):
            relative_key(os.path.join('..', 'other.txt'))


class TestCollect:
    """Tests for collect."""

    def test_single_file(self, isolated_env):
        make_tree(isolated_env, {'a.txt': b'hello'})
        mapping = collect(['a.txt'])
        try:
            assert list(mapping) == ['a.txt']
            entry = mapping['a.txt']
            assert isinstance(entry, FileEntry)
            assert entry.path == 'a.txt'
            assert entry.stream.read() == b'hello'
        finally:
            close_all(mapping)

    def test_directory_is_recursive(self, isolated_env):
        make_tree(isolated_env, {
            'assets/index.html': b'<html>',
            'assets/css/site.css': b'body {}',
            'assets/img/deep/logo.png': b'\x89PNG',
        })
        mapping = collect(['assets'])
        try:
            assert sorted(mapping) == [
                'assets/css/site.css',
                'assets/img/deep/logo.png',
                'assets/index.html',
            ]
        finally:
            close_all(mapping)

    def test_empty_subdirectory_contributes_nothing(self, isolated_env):
        make_tree(isolated_env, {'dir/only.txt': b'x'})
        (isolated_env / 'dir' / 'empty').mkdir()
        mapping = collect(['dir'])
        try:
            assert list(mapping) == ['dir/only.txt']
        finally:
            close_all(mapping)

    def test_empty_directory_root(self, isolated_env):
        (isolated_env / 'nothing').mkdir()
        assert collect(['nothing']) == {}

    def test_prefix_strips_keys(self, isolated_env):
        make_tree(isolated_env, {'static/js/app.js': b'1', 'static/robots.txt': b'2'})
        mapping = collect(['static'], prefix='static')
        try:
            assert sorted(mapping) == ['js/app.js', 'robots.txt']
        finally:
            close_all(mapping)

    def test_absolute_prefix(self, isolated_env):
        make_tree(isolated_env, {'c/d.txt': b'data'})
        mapping = collect([str(isolated_env / 'c' / 'd.txt')], prefix=str(isolated_env))
        try:
            assert list(mapping) == ['c/d.txt']
        finally:
            close_all(mapping)

    def test_directory_children_visited_sorted(self, isolated_env, monkeypatch):
        make_tree(isolated_env, {'d/b.txt': b'', 'd/c.txt': b'', 'd/a.txt': b''})
        monkeypatch.setattr(os, 'listdir', lambda path: ['c.txt', 'a.txt', 'b.txt'])
        mapping = collect(['d'])
        try:
            assert list(mapping) == ['d/a.txt', 'd/b.txt', 'd/c.txt']
        finally:
            close_all(mapping)

    def test_repeated_runs_same_keys(self, isolated_env):
        make_tree(isolated_env, {'t/x/1': b'1', 't/y/2': b'2', 't/3': b'3'})
        first = collect(['t'])
        second = collect(['t'])
        try:
            assert list(first) == list(second)
        finally:
            close_all(first)
            close_all(second)

    def test_duplicate_last_wins(self, isolated_env, capsys):
        make_tree(isolated_env, {'a.txt': b'same'})
        mapping = collect(['a.txt', 'a.txt'])
        try:
            assert list(mapping) == ['a.txt']
            assert mapping['a.txt'].stream.read() == b'same'
        finally:
            close_all(mapping)
        assert 'warning' in capsys.readouterr().err

    def test_duplicate_closes_earlier_handle(self, isolated_env, monkeypatch):
        make_tree(isolated_env, {'dir/a.txt': b'1'})
        opened = []
        real_open = builtins.open

        def recording_open(*args, **kwargs):
            f = real_open(*args, **kwargs)
            opened.append(f)
            return f

        monkeypatch.setattr('bindata.collector.open', recording_open, raising=False)
        mapping = collect(['dir', 'dir/a.txt'], warn=False)
        try:
            assert len(opened) == 2
            assert opened[0].closed
            assert mapping['dir/a.txt'].stream is opened[1]
        finally:
            close_all(mapping)

    def test_duplicate_quiet(self, isolated_env, capsys):
        make_tree(isolated_env, {'a.txt': b''})
        close_all(collect(['a.txt', 'a.txt'], warn=False))
        assert capsys.readouterr().err == ''

    def test_missing_root_raises(self, isolated_env):
        with pytest.raises(FileNotFoundError):
            collect(['missing.txt'])

    def test_outside_prefix_raises(self, isolated_env):
        make_tree(isolated_env, {'a.txt': b'', 'sub/b.txt': b''})
        with pytest.raises(PathOutsidePrefixError):
            collect(['a.txt'], prefix='sub')

    def test_failure_closes_opened_files(self, isolated_env, monkeypatch):
        make_tree(isolated_env, {'a.txt': b'a', 'b.txt': b'b'})
        opened = []
        real_open = builtins.open

        def recording_open(*args, **kwargs):
            f = real_open(*args, **kwargs)
            opened.append(f)
            return f

        monkeypatch.setattr('bindata.collector.open', recording_open, raising=False)
        with pytest.raises(FileNotFoundError):
            collect(['a.txt', 'b.txt', 'missing.txt'])
        assert len(opened) == 2
        assert all(f.closed for f in opened)

    def test_accepts_path_objects(self, isolated_env):
        make_tree(isolated_env, {'p.bin': b'\x00'})
        mapping = collect([Path('p.bin')])
        try:
            assert list(mapping) == ['p.bin']
        finally:
            close_all(mapping)


class TestResponseFiles:
    """Tests for @response_file expansion."""

    def test_parse_skips_comments_and_blanks(self, isolated_env):
        listing = isolated_env / 'files.txt'
        listing.write_text('# assets\na.txt\n\n  b/c.txt  \n#d.txt\n')
        assert parse_response_file(listing) == ['a.txt', 'b/c.txt']

    def test_parse_keeps_undecodable_bytes(self, isolated_env):
        listing = isolated_env / 'list.txt'
        listing.write_bytes(b'a.txt\n\xff\xfe.txt\n')
        paths = parse_response_file(listing)
        assert paths == ['a.txt', '\udcff\udcfe.txt']
        assert os.fsencode(paths[1]) == b'\xff\xfe.txt'

    def test_expand_mixes_arguments(self, isolated_env):
        (isolated_env / 'list.txt').write_text('one\ntwo\n')
        assert expand_response_files(['zero', '@list.txt', 'three']) == [
            'zero', 'one', 'two', 'three',
        ]

    def test_missing_response_file_raises(self, isolated_env):
        with pytest.raises(FileNotFoundError):
            expand_response_files(['@nope.txt'])
