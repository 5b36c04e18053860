"""Shared test fixtures — sample Rust sources, sample diffs, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def mixed_source() -> str:
    """Production code followed by an inline test module."""
    return textwrap.dedent("""\
        /// Adds two numbers.
        pub fn add(a: i32, b: i32) -> i32 {
            a + b // sum
        }

        #[cfg(test)]
        mod tests {
            use super::*;

            #[test]
            fn adds() {
                assert_eq!(add(1, 2), 3);
            }
        }
    """)


@pytest.fixture
def sample_diff_modified() -> str:
    return textwrap.dedent("""\
        diff --git a/src/lib.rs b/src/lib.rs
        index 1234567..abcdef0 100644
        --- a/src/lib.rs
        +++ b/src/lib.rs
        @@ -2 +2,3 @@ pub fn add(a: i32, b: i32) -> i32 {
        -    a + b
        +    let s = a + b;
        +    // done
        +    s
        @@ -10,0 +13,2 @@ mod tests {
        +    #[test]
        +    fn more() {}
    """)


@pytest.fixture
def sample_diff_new_file() -> str:
    return textwrap.dedent("""\
        diff --git a/src/util.rs b/src/util.rs
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/src/util.rs
        @@ -0,0 +1,3 @@
        +pub fn id<T>(x: T) -> T {
        +    x
        +}
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    return textwrap.dedent("""\
        diff --git a/src/old.rs b/src/old.rs
        deleted file mode 100644
        index abc1234..0000000
        --- a/src/old.rs
        +++ /dev/null
        @@ -1,2 +0,0 @@
        -fn old() {}
        -
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/logo.png b/logo.png
        new file mode 100644
        index 0000000..abc1234
        Binary files /dev/null and b/logo.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A diff with a renamed file."""
    return textwrap.dedent("""\
        diff --git a/src/old_name.rs b/src/new_name.rs
        similarity index 97%
        rename from src/old_name.rs
        rename to src/new_name.rs
        index abc1234..def5678 100644
        --- a/src/old_name.rs
        +++ b/src/new_name.rs
        @@ -1,0 +2,1 @@
        +// New line added after rename
    """)


@pytest.fixture
def sample_diff_pure_rename() -> str:
    return textwrap.dedent("""\
        diff --git a/src/a.rs b/src/b.rs
        similarity index 100%
        rename from src/a.rs
        rename to src/b.rs
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only file mode change."""
    return textwrap.dedent("""\
        diff --git a/build.sh b/build.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_submodule() -> str:
    """A diff with submodule pointer change."""
    return textwrap.dedent("""\
        diff --git a/vendor/lib b/vendor/lib
        index abc1234..def5678 160000
        --- a/vendor/lib
        +++ b/vendor/lib
        @@ -1 +1 @@
        -Subproject commit abc1234567890abcdef1234567890abcdef123456
        +Subproject commit def4567890abcdef1234567890abcdef123456ab
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """A diff with 'No newline at end of file' marker."""
    return textwrap.dedent("""\
        diff --git a/src/main.rs b/src/main.rs
        new file mode 100644
        index 0000000..abc1234
        --- /dev/null
        +++ b/src/main.rs
        @@ -0,0 +1 @@
        +fn main() {}
        \\ No newline at end of file
    """)


@pytest.fixture
def rust_tree(tmp_path: Path) -> Path:
    """A small Cargo workspace with production, test and example files."""
    files = {
        "Cargo.toml": '[workspace]\nmembers = ["core", "cli"]\n',
        "core/Cargo.toml": '[package]\nname = "core"\nversion = "0.1.0"\n',
        "core/src/lib.rs": textwrap.dedent("""\
            //! Core crate.

            pub fn one() -> u32 {
                1
            }

            #[cfg(test)]
            mod tests {
                #[test]
                fn it_works() {
                    assert_eq!(super::one(), 1);
                }
            }
        """),
        "core/tests/integration.rs": "#[test]\nfn smoke() {}\n",
        "cli/Cargo.toml": '[package]\nname = "cli"\nversion = "0.1.0"\n',
        "cli/src/main.rs": "// entry point\nfn main() {\n    println!(\"hi\");\n}\n",
        "cli/examples/demo.rs": "fn main() {}\n",
        "target/debug/build.rs": "fn ignored() {}\n",
        "notes.txt": "not rust\n",
    }
    for rel, content in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return tmp_path


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "lib.rs").write_text("pub fn a() {}\n")
    (tmp_path / "README.md").write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
