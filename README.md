# suiup

A library for managing Sui tooling binaries. It fetches releases of `sui`,
`walrus`, `site-builder` and `mvr` from their GitHub release pages, keeps the
downloaded archives in a local cache, unpacks the binaries into a per-network
folder and copies a chosen version into a default `bin` directory.

## Where files live

Locations follow the XDG conventions on Linux and macOS, and
`LOCALAPPDATA` / `TEMP` on Windows:

| What | Default location |
|------|------------------|
| Configuration (`default_version.json`, `installed_binaries.json`) | `$XDG_CONFIG_HOME/suiup` or `~/.config/suiup` |
| Installed binaries, one folder per network | `$XDG_DATA_HOME/suiup/binaries` or `~/.local/share/suiup/binaries` |
| Release archives (`releases/`) and the release-list cache | `$XDG_CACHE_HOME/suiup` or `~/.cache/suiup` |
| Default binaries | `$SUIUP_DEFAULT_BIN_DIR` or `~/.local/bin` |

`suiup.paths.initialize()` creates all of these directories and the two JSON
files if they are missing. `suiup.paths.handle_which()` prints the default
`bin` directory; make sure it is on your `PATH`. After a binary is set as
default, `suiup.handlers.core.check_path_and_warn()` prints instructions if
that directory is not on `PATH`.

## Installing binaries

```python
from suiup.paths import initialize
from suiup.handlers.install import install_from_release, install_standalone
from suiup.types import Repo

initialize()

# Latest testnet release of sui, made the default without prompting.
install_from_release("sui", "testnet", None, False, True, Repo.SUI, None)

# A specific walrus version from the mainnet release.
install_from_release("walrus", "mainnet", "1.54.0", False, True, Repo.WALRUS, None)

# mvr is not tied to a network; None picks its latest release.
install_standalone(None, Repo.MVR, True)
```

When `yes` is `False`, you are asked on standard input whether the new
version should become the default. Installed binaries are recorded in
`installed_binaries.json`; defaults in `default_version.json`.

A GitHub token may be passed as the last argument of `install_from_release`
to raise the API rate limit. Release lists are cached together with their
ETag. Downloads that already exist in the cache with the expected size are
reused, and checked against a `.md5` file next to them when one exists.

## Inspecting what is installed

```python
from suiup.types import InstalledBinaries
from suiup.handlers.core import installed_binaries_grouped_by_network

installed = InstalledBinaries.load()
for network, binaries in installed_binaries_grouped_by_network(installed).items():
    print(network, [str(b) for b in binaries])
```

`suiup.types.Binaries.from_defaults(mapping)` turns the contents of
`default_version.json` into a `Binaries` value whose `str()` lists them by
network.

## Release helpers

```python
from suiup.handlers.version import extract_version_from_release
from suiup.handlers.release import ensure_version_prefix, find_networks_with_version

extract_version_from_release("sui-testnet-v1.53.0-ubuntu-x86_64.tgz")  # "v1.53.0"
ensure_version_prefix("1.53.0")                                         # "v1.53.0"
```

When a requested release cannot be found, the raised error lists the networks
where that version does exist, with the matching install spec for each.

## Cleaning the cache

```python
from suiup.handlers.cleanup import handle_cleanup

handle_cleanup(False, 30, True)   # list archives older than 30 days (dry run)
handle_cleanup(True, 30, False)   # remove every cached archive
```

## Updating the suiup executable

`suiup.handlers.selfupdate.handle_update()` runs the current executable with
`--version` (expecting output such as `suiup 0.0.8`), compares it with the
latest published suiup release and, when they differ, downloads the release
archive for this platform and copies the new binary over the executable.
`check_for_updates()` does the comparison in a background thread and only
prints a notice; `handle_uninstall()` deletes the executable.

## Errors

Failures are raised as `suiup.types.SuiupError` with a message describing what
went wrong.

## What this package does not do

- It has no command-line program of its own; everything is called from
  Python. Messages it prints that mention commands such as `suiup install` or
  `suiup default set` refer to a command-line front end that is not part of
  this package.
- It does not list or switch defaults beyond what `update_after_install`
  does right after an install, and it has no command to update an installed
  tool to its latest release.
- It does not build tools from a source branch; only published release
  archives and standalone release binaries are installed.