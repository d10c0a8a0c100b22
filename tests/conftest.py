"""Shared fixtures: run contexts with captured channels and small file trees."""

import io

import pytest

from reclaim.config import CompareConfig, DedupeConfig, ReclaimConfig
from reclaim.context import RunContext
from reclaim.report import Reporter


@pytest.fixture
def make_ctx():
    """Build a RunContext whose output and diagnostics land in StringIO buffers."""
    def _make(block_size=None, checksum=None, **dedupe):
        compare = {}
        if block_size is not None:
            compare["block_size"] = block_size
        if checksum is not None:
            compare["checksum"] = checksum
        cfg = ReclaimConfig(dedupe=DedupeConfig(**dedupe), compare=CompareConfig(**compare))
        reporter = Reporter(out=io.StringIO(), err=io.StringIO())
        return RunContext(cfg=cfg, reporter=reporter)
    return _make


@pytest.fixture
def tree(tmp_path):
    """Create files from a {relative path: content} mapping; ``None`` makes a directory."""
    def _tree(layout):
        for rel, content in layout.items():
            path = tmp_path / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)
        return tmp_path
    return _tree


def output_lines(ctx):
    return ctx.reporter.out.getvalue().splitlines()


def diagnostic_lines(ctx):
    return ctx.reporter.err.getvalue().splitlines()


@pytest.fixture
def out_lines():
    return output_lines


@pytest.fixture
def err_lines():
    return diagnostic_lines
