"""
Pytest configuration and shared fixtures
"""

import pytest
import os
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create temporary directory for test files"""
    dirpath = tempfile.mkdtemp()
    yield dirpath
    shutil.rmtree(dirpath)


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day.
"""


@pytest.fixture
def sample_input_file(temp_dir, sample_text):
    """Create a sample input file for testing"""
    filepath = os.path.join(temp_dir, 'input.txt')
    with open(filepath, 'w', newline='\n') as f:
        f.write(sample_text)
    return filepath


@pytest.fixture
def write_lines(temp_dir):
    """Factory writing newline-terminated lines to a file in temp_dir"""
    def _write(lines, name='lines.txt'):
        filepath = os.path.join(temp_dir, name)
        with open(filepath, 'w', newline='\n') as f:
            for line in lines:
                f.write(f"{line}\n")
        return filepath
    return _write


@pytest.fixture
def empty_input_file(temp_dir):
    """Zero-byte input file"""
    filepath = os.path.join(temp_dir, 'empty.txt')
    open(filepath, 'w').close()
    return filepath
