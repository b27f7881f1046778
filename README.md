# barforge

barforge is a library of the checks that sit between a downloaded Waybar
module package and the disk. It verifies package signatures and hashes,
unpacks tarballs without letting entries escape the target directory, reads a
module's `Package.toml`, checks its dependencies, screens its shell scripts
for risky commands and runs them under a time limit. It can also read the
colour palette of the current Omarchy theme.

## Modules

- `barforge.verification`
  - `Verifier` checks minisign signatures against the built-in registry key,
    or against another key passed to it.
  - `Verifier.verify(content, signature)` accepts only prehashed (BLAKE2b)
    signatures. It checks both the signature and the signed trusted comment,
    and returns the trusted comment. Legacy signatures, a wrong key id or a bad
    signature raise `VerificationFailedError`. A malformed signature file
    raises `InvalidSignatureError`.
  - `Verifier.verify_with_hash(content, signature, expected_hash)` also
    compares the SHA-256 of the content with the expected hash.
  - `compute_sha256(data)` returns the lower-case hex digest.
- `barforge.url_validation`
  - `validate_web_url` accepts only `http` and `https` URLs.
  - `validate_github_url` accepts only `https://github.com/...` and returns
    the parsed URL.
  - `parse_github_url_safe` returns `(owner, repository)`.
  - Failures raise subclasses of `UrlValidationError`.
- `barforge.archive_extraction`
  - `extract_tarball_safe(data, dest)` unpacks a `.tar.gz` held in memory. It
    refuses archives over `MAX_PACKAGE_SIZE` (50 MiB), symlinks, hard links,
    absolute paths and entries that climb out of `dest`. File modes are masked
    to `0o755`.
  - `extract_tarball_from_reader(reader, dest, max_size)` reads at most
    `max_size` bytes from a binary stream and then extracts them.
  - `normalize_path_algebraic` and `safe_extraction_path` do the lexical path
    checks.
- `barforge.path_validation`
  - `validate_extraction_path(base_dir, relative_path)` rejects absolute paths
    and `..` components. It also rejects paths whose nearest existing ancestor
    resolves outside `base_dir`. Failures raise `PathTraversalError`, whose
    `kind` is a `PathTraversalKind`.
- `barforge.package_config`
  - `PackageToml.from_str` and `PackageToml.from_file` parse the `[package]`,
    `[dependencies]` and `[permissions]` tables. Malformed input raises
    `PackageConfigError`.
  - `to_dep_specs()` returns the declared dependencies as specs.
  - `to_sandbox_config()` returns the declared permissions as a
    `SandboxConfig`, with a leading `~` expanded.
- `barforge.dependency_checker`
  - `check_binary` looks a name up on `PATH` and reads its `--version`
    output.
  - `check_python_module` tries to import the module with `python3`.
  - `check_dependencies` checks a list of `DepSpec` and returns a `DepReport`
    listing the required dependencies that are missing.
  - Names are validated first (`is_valid_binary_name`,
    `is_valid_python_module_name`).
  - `extract_version` finds the first version number in a text that is not an
    IPv4 address.
- `barforge.script_inspection`
  - `inspect_script_safety(content)` reports network tools, sensitive paths,
    destructive commands, secret environment variables and dynamic code
    execution, line by line.
- `barforge.script_execution`
  - `run_script_unsandboxed(script, module_dir, timeout)` runs a script with
    `bash` in `module_dir`, with `MODULE_DIR` set, and returns a
    `ScriptResult`.
  - If the script overruns `timeout`, its process group is killed and
    `ScriptTimeoutError` is raised.
- `barforge.sandbox`
  - `SandboxConfig` describes what a module script may reach. It can be
    written with `to_json()` and read back with `from_json()`.
  - `is_allowed_read_path` and `is_allowed_write_path` hold the whitelists
    that extra paths are checked against.
  - `SandboxStatus` and `SandboxSeverity` describe how far restrictions were
    applied.
- `barforge.omarchy_theme`
  - `is_omarchy_available()` tells whether the current Omarchy theme has an
    `alacritty.toml`.
  - `load_omarchy_palette()` reads that file into an `OmarchyPalette`.
    Missing colours fall back to mid grey.
  - `parse_alacritty_toml` and `hex_to_color` are the helpers it uses.

## Examples

### Verify and unpack a package

```python
from pathlib import Path

from barforge.archive_extraction import extract_tarball_safe
from barforge.verification import Verifier

data = Path("package.tar.gz").read_bytes()
signature = Path("package.tar.gz.minisig").read_text()
expected_hash = Path("package.tar.gz.sha256").read_text().strip()

Verifier().verify_with_hash(data, signature, expected_hash)
extract_tarball_safe(data, Path("module"))
```

### Check a module's dependencies

```python
from barforge.dependency_checker import check_dependencies
from barforge.package_config import PackageToml

pkg = PackageToml.from_file("module/Package.toml")
report = check_dependencies(pkg.to_dep_specs())
if not report.all_satisfied:
    print("missing:", ", ".join(report.missing_required))
```

### Review and run an install script

```python
from pathlib import Path

from barforge.script_execution import run_script_unsandboxed
from barforge.script_inspection import inspect_script_safety

script = Path("module/install.sh")
review = inspect_script_safety(script.read_text())
for warning in review.warnings:
    print(warning)

if not review.has_warnings():
    result = run_script_unsandboxed(script, script.parent, timeout=60)
    print(result.exit_code, result.stdout)
```

## What it does not do

barforge provides no command and no graphical interface. It does not download
anything from a module registry and does not check whether a module has been
revoked. It does not keep a record of installed modules, and it does not edit
the Waybar configuration or stylesheet. It also does not store module
preferences.

`SandboxConfig` and `SandboxStatus` only describe a sandbox; nothing in the
package applies kernel restrictions to a process. Scripts run through
`run_script_unsandboxed` run with the caller's full rights.