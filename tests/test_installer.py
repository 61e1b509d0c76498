"""Tests for the dotnet-install script installer."""

import errno
import os
import subprocess
from unittest.mock import patch

import pytest

from sdk.installer import ScriptSdkInstaller, classify_script_failure
from sdk.repository import InstalledSdkRepository
from versioning.errors import ChecksumMismatch, DiskFull, DownloadFailed, InstallerError, InUse, NotFound
from versioning.parser import parse_version

VERSION = parse_version("8.0.415")


@pytest.fixture
def repo(tmp_path):
    return InstalledSdkRepository(tmp_path / "dotnet")


@pytest.fixture
def installer(repo):
    return ScriptSdkInstaller(repo, script_url="https://example.test/dotnet-install.sh", windows=False)


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestBuildCommand:
    """Command line passed to dotnet-install."""

    def test_unix(self, installer, repo):
        cmd = installer.build_command("/tmp/dotnet-install.sh", VERSION)
        assert cmd[:2] == ["bash", "/tmp/dotnet-install.sh"]
        assert cmd[cmd.index("--version") + 1] == "8.0.415"
        assert cmd[cmd.index("--install-dir") + 1] == str(repo.install_root)
        assert "--no-path" in cmd

    def test_windows(self, repo):
        installer = ScriptSdkInstaller(repo, windows=True)
        cmd = installer.build_command("C:\\tmp\\dotnet-install.ps1", VERSION)
        assert cmd[0] == "powershell"
        assert cmd[cmd.index("-Version") + 1] == "8.0.415"
        assert cmd[cmd.index("-InstallDir") + 1] == str(repo.install_root)
        assert installer.script_url.endswith(".ps1")

    def test_default_unix_script(self, repo):
        assert ScriptSdkInstaller(repo, windows=False).script_url.endswith(".sh")


class TestInstall:
    """ScriptSdkInstaller.install outcomes."""

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_success(self, mock_download, mock_run, installer, repo):
        def run(cmd, **kwargs):
            repo.path_for(VERSION).mkdir(parents=True)
            return completed(stdout="Installation finished")

        mock_run.side_effect = run
        installer.install(VERSION)

        mock_download.assert_called_once()
        assert mock_download.call_args[0][0] == "https://example.test/dotnet-install.sh"
        script_path = mock_run.call_args[0][0][1]
        assert not os.path.exists(script_path)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_success_without_sdk_dir_is_failure(self, mock_download, mock_run, installer):
        mock_run.return_value = completed()
        with pytest.raises(DownloadFailed):
            installer.install(VERSION)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_script_failure_is_download_failed(self, mock_download, mock_run, installer):
        mock_run.return_value = completed(returncode=1, stderr="dotnet-install: Could not find `.NET Core SDK` with version = 8.0.999")
        with pytest.raises(DownloadFailed) as excinfo:
            installer.install(VERSION)
        assert "8.0.999" in str(excinfo.value)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_checksum_mismatch(self, mock_download, mock_run, installer):
        mock_run.return_value = completed(
            returncode=1, stderr="dotnet-install: The hash of the downloaded file does not match the expected value.")
        with pytest.raises(ChecksumMismatch):
            installer.install(VERSION)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_disk_full(self, mock_download, mock_run, installer):
        mock_run.return_value = completed(returncode=1, stderr="tar: write error: No space left on device")
        with pytest.raises(DiskFull):
            installer.install(VERSION)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_timeout(self, mock_download, mock_run, installer):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="bash", timeout=1)
        with pytest.raises(DownloadFailed):
            installer.install(VERSION)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_missing_shell(self, mock_download, mock_run, installer):
        mock_run.side_effect = FileNotFoundError(errno.ENOENT, "No such file", "bash")
        with pytest.raises(DownloadFailed):
            installer.install(VERSION)

    @patch("sdk.installer.subprocess.run")
    @patch("sdk.installer.download_file")
    def test_script_download_failure_passes_through(self, mock_download, mock_run, installer):
        mock_download.side_effect = DownloadFailed("HTTP 404")
        with pytest.raises(DownloadFailed):
            installer.install(VERSION)
        mock_run.assert_not_called()


class TestClassifyScriptFailure:
    """Mapping of script output to installer errors."""

    def test_generic(self):
        err = classify_script_failure("something broke", 2)
        assert type(err) is DownloadFailed
        assert "exit code 2" in str(err)

    def test_checksum_wording(self):
        assert isinstance(classify_script_failure("Checksum mismatch for archive", 1), ChecksumMismatch)

    def test_output_tail_only(self):
        output = "\n".join(f"line {i}" for i in range(100))
        message = str(classify_script_failure(output, 1))
        assert "line 99" in message
        assert "line 10\n" not in message


class TestUninstall:
    """ScriptSdkInstaller.uninstall outcomes."""

    def test_removes_directory(self, installer, repo):
        path = repo.path_for(VERSION)
        (path / "Sdks").mkdir(parents=True)
        installer.uninstall(VERSION)
        assert not path.exists()
        assert repo.sdk_root.exists()

    def test_not_found(self, installer, repo):
        repo.sdk_root.mkdir(parents=True)
        with pytest.raises(NotFound):
            installer.uninstall(VERSION)

    @patch("sdk.installer.shutil.rmtree")
    def test_in_use(self, mock_rmtree, installer, repo):
        repo.path_for(VERSION).mkdir(parents=True)
        mock_rmtree.side_effect = PermissionError(errno.EACCES, "Access denied")
        with pytest.raises(InUse):
            installer.uninstall(VERSION)

    @patch("sdk.installer.shutil.rmtree")
    def test_busy(self, mock_rmtree, installer, repo):
        repo.path_for(VERSION).mkdir(parents=True)
        mock_rmtree.side_effect = OSError(errno.EBUSY, "Device or resource busy")
        with pytest.raises(InUse):
            installer.uninstall(VERSION)

    @patch("sdk.installer.shutil.rmtree")
    def test_other_os_error(self, mock_rmtree, installer, repo):
        repo.path_for(VERSION).mkdir(parents=True)
        mock_rmtree.side_effect = OSError(errno.EIO, "I/O error")
        with pytest.raises(InstallerError):
            installer.uninstall(VERSION)
