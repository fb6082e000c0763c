#!/usr/bin/env python3
"""
tinysh Unit Tests

Tests for the parser, exceptions, configuration, logging, status
decoding, launcher and descriptor handling. System calls that would
replace or fork the test process are mocked.

Run with: python -m pytest tinysh/tests -v
Or: python tinysh/tests/unit_tests.py

Author: YSNRFD
Version: 1.0.0
"""

import json
import os
import signal
import sys
import tempfile
import unittest
from unittest import mock


class TestTokenizer(unittest.TestCase):
    """Test splitting input lines into words."""

    def test_collapses_delimiters(self):
        """Runs of delimiters separate words and leave no empty tokens."""
        from tinysh.shell.parser import tokenize

        self.assertEqual(tokenize("  ls  -la ", " \t\n"), ["ls", "-la"])

    def test_empty_and_blank_lines(self):
        """Empty or all-delimiter input gives no tokens."""
        from tinysh.shell.parser import tokenize

        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(" \t \n"), [])

    def test_tabs_and_newline(self):
        """Tabs and the trailing newline are delimiters."""
        from tinysh.shell.parser import tokenize

        self.assertEqual(tokenize("echo\thi |\twc -w\n"), ["echo", "hi", "|", "wc", "-w"])

    def test_custom_delimiters(self):
        """Only the given characters delimit words."""
        from tinysh.shell.parser import tokenize

        self.assertEqual(tokenize("a:b::c d", ":"), ["a", "b", "c d"])

    def test_input_is_not_modified(self):
        """The caller's string is left intact."""
        from tinysh.shell.parser import tokenize

        line = "cat file | wc"
        tokenize(line)
        self.assertEqual(line, "cat file | wc")

    def test_operators_must_be_separate_words(self):
        """No operator splitting happens inside a word."""
        from tinysh.shell.parser import tokenize

        self.assertEqual(tokenize("echo hi>out"), ["echo", "hi>out"])


class TestClassifier(unittest.TestCase):
    """Test detection of the first operator."""

    def test_plain_command(self):
        from tinysh.shell.parser import classify, FeatureType

        self.assertIs(classify(["ls", "-la"]), FeatureType.NONE)

    def test_pipe(self):
        from tinysh.shell.parser import classify, FeatureType

        self.assertIs(classify(["a", "|", "b"]), FeatureType.PIPE)

    def test_append(self):
        from tinysh.shell.parser import classify, FeatureType

        self.assertIs(classify(["a", ">>", "f"]), FeatureType.APPEND)

    def test_overwrite(self):
        from tinysh.shell.parser import classify, FeatureType

        self.assertIs(classify(["a", ">", "f"]), FeatureType.OVERWRITE)

    def test_first_operator_wins(self):
        """The leftmost operator decides the classification."""
        from tinysh.shell.parser import classify, FeatureType

        self.assertIs(classify(["a", "|", "b", ">", "f"]), FeatureType.PIPE)
        self.assertIs(classify(["a", ">>", "f", "|", "b"]), FeatureType.APPEND)

    def test_empty_argv(self):
        from tinysh.shell.parser import classify, FeatureType

        self.assertIs(classify([]), FeatureType.NONE)


class TestSplitter(unittest.TestCase):
    """Test splitting around the first operator."""

    def test_split_on_pipe(self):
        from tinysh.shell.parser import split, Pipeline

        self.assertEqual(
            split(["a", "|", "b", "c"]),
            Pipeline(head=["a"], tail=["b", "c"])
        )

    def test_tail_keeps_further_operators(self):
        from tinysh.shell.parser import split

        pipeline = split(["a", "-x", "|", "b", ">", "f"])
        self.assertEqual(pipeline.head, ["a", "-x"])
        self.assertEqual(pipeline.tail, ["b", ">", "f"])

    def test_reconstructs_input(self):
        """head + operator + tail is the original vector."""
        from tinysh.shell.parser import split

        argv = ["sort", "-r", ">>", "out.txt"]
        pipeline = split(argv)
        self.assertEqual(pipeline.head + [">>"] + pipeline.tail, argv)

    def test_no_operator(self):
        from tinysh.shell.parser import split
        from tinysh.exceptions import PipelineSyntaxError

        with self.assertRaises(PipelineSyntaxError):
            split(["ls", "-la"])


class TestStageParser(unittest.TestCase):
    """Test the single-pass stage list."""

    def test_single_command(self):
        from tinysh.shell.parser import parse_stages, Stage, FeatureType

        self.assertEqual(parse_stages(["ls", "-la"]), [Stage(["ls", "-la"], FeatureType.NONE)])

    def test_three_stage_pipeline(self):
        from tinysh.shell.parser import parse_stages, Stage, FeatureType

        stages = parse_stages(["a", "|", "b", "-n", "|", "c"])
        self.assertEqual(stages, [
            Stage(["a"], FeatureType.PIPE),
            Stage(["b", "-n"], FeatureType.PIPE),
            Stage(["c"], FeatureType.NONE),
        ])

    def test_pipe_then_redirect(self):
        from tinysh.shell.parser import parse_stages, Stage, FeatureType

        stages = parse_stages(["a", "|", "b", ">", "f"])
        self.assertEqual(stages, [
            Stage(["a"], FeatureType.PIPE),
            Stage(["b"], FeatureType.OVERWRITE),
            Stage(["f"], FeatureType.NONE),
        ])

    def test_extra_tokens_after_target_are_kept(self):
        """The router ignores them; the parser does not drop them."""
        from tinysh.shell.parser import parse_stages

        stages = parse_stages(["echo", "hi", ">>", "f", "g"])
        self.assertEqual(stages[-1].argv, ["f", "g"])

    def test_syntax_errors(self):
        from tinysh.shell.parser import parse_stages
        from tinysh.exceptions import PipelineSyntaxError

        for argv in (
            ["|", "wc"],
            ["ls", "|"],
            ["ls", ">"],
            ["ls", "|", "|", "wc"],
            ["ls", ">", "f", "|", "wc"],
            ["ls", ">>", ">", "f"],
            [],
        ):
            with self.subTest(argv=argv):
                with self.assertRaises(PipelineSyntaxError):
                    parse_stages(argv)

    def test_missing_file_name_message(self):
        from tinysh.shell.parser import parse_stages
        from tinysh.exceptions import PipelineSyntaxError

        with self.assertRaises(PipelineSyntaxError) as cm:
            parse_stages(["ls", ">>"])
        self.assertIn("missing file name", cm.exception.message)
        self.assertEqual(cm.exception.token, ">>")


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_shell_exception(self):
        from tinysh.exceptions import ShellException

        exc = ShellException("Test error", error_code=1001, context={'fd': 3})

        self.assertEqual(exc.message, "Test error")
        self.assertEqual(exc.error_code, 1001)
        self.assertIn("1001", str(exc))
        self.assertIn("fd=3", str(exc))

    def test_hierarchy(self):
        from tinysh.exceptions import (
            ShellException, ProcessException, DescriptorException,
            CommandNotFoundError, ExecError, SpawnError, WaitError,
            DescriptorError, PipeError, PipelineSyntaxError,
        )

        for cls in (CommandNotFoundError, ExecError, SpawnError, WaitError):
            self.assertTrue(issubclass(cls, ProcessException))
        for cls in (DescriptorError, PipeError):
            self.assertTrue(issubclass(cls, DescriptorException))
        self.assertTrue(issubclass(PipelineSyntaxError, ShellException))
        self.assertTrue(issubclass(ProcessException, ShellException))

    def test_command_not_found(self):
        from tinysh.exceptions import CommandNotFoundError

        exc = CommandNotFoundError("sl", searched=["/bin", "/usr/bin"])
        self.assertEqual(exc.program, "sl")
        self.assertEqual(exc.error_code, 2004)
        self.assertIn("command not found", exc.message)
        self.assertEqual(exc.context["searched"], "/bin:/usr/bin")

    def test_descriptor_error_context(self):
        from tinysh.exceptions import DescriptorError

        exc = DescriptorError("Permission denied", operation="open", path="/x", errno=13)
        self.assertEqual(exc.operation, "open")
        self.assertEqual(exc.errno, 13)
        self.assertEqual(exc.context["path"], "/x")


class TestExitStatus(unittest.TestCase):
    """Test decoding of wait statuses."""

    def test_success(self):
        from tinysh.process.states import ExitStatus, StatusKind

        status = ExitStatus.from_wait_status(0)
        self.assertIs(status.kind, StatusKind.SUCCESS)
        self.assertTrue(status.ok)

    def test_failure_code(self):
        from tinysh.process.states import ExitStatus, StatusKind

        status = ExitStatus.from_wait_status(3 << 8)
        self.assertIs(status.kind, StatusKind.FAILURE)
        self.assertEqual(status.code, 3)
        self.assertFalse(status.command_not_found)

    def test_command_not_found(self):
        from tinysh.process.states import ExitStatus

        self.assertTrue(ExitStatus.from_wait_status(127 << 8).command_not_found)

    def test_killed_by_user(self):
        from tinysh.process.states import ExitStatus, StatusKind

        for signum in (signal.SIGINT, signal.SIGQUIT):
            status = ExitStatus.from_wait_status(int(signum))
            self.assertIs(status.kind, StatusKind.KILLED)
            self.assertTrue(status.interrupted_by_user)

    def test_killed_by_other_signal(self):
        from tinysh.process.states import ExitStatus, StatusKind

        status = ExitStatus.from_wait_status(int(signal.SIGTERM))
        self.assertIs(status.kind, StatusKind.KILLED)
        self.assertFalse(status.interrupted_by_user)
        self.assertIn("SIGTERM", str(status))


class TestConfig(unittest.TestCase):
    """Test the configuration system."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_default_config(self):
        from tinysh.core.config_loader import Config

        config = Config()

        self.assertEqual(config.shell.prompt, "tinysh> ")
        self.assertEqual(config.shell.delimiters, " \t\n")
        self.assertFalse(config.verbose)
        self.assertEqual(config.paths, [])
        self.assertFalse(config.search_path.fallback)

    def test_load_json(self):
        from tinysh.core.config_loader import ConfigLoader

        path = self._write('tinysh.json', json.dumps({
            'shell': {'prompt': '$ ', 'verbose': True},
            'search_path': {'directories': ['/opt/bin'], 'fallback': True},
            'logging': {'level': 'DEBUG'},
        }))
        config = ConfigLoader().load(path)

        self.assertEqual(config.shell.prompt, '$ ')
        self.assertTrue(config.verbose)
        self.assertEqual(config.shell.delimiters, " \t\n")
        self.assertEqual(config.paths, ['/opt/bin'])
        self.assertTrue(config.search_path.fallback)
        self.assertEqual(config.logging.level, 'DEBUG')

    def test_invalid_json(self):
        from tinysh.core.config_loader import ConfigLoader
        from tinysh.exceptions import ConfigValidationError

        path = self._write('bad.json', '{not json')
        with self.assertRaises(ConfigValidationError):
            ConfigLoader().load(path)

    def test_wrong_type_and_unknown_key(self):
        from tinysh.core.config_loader import ConfigLoader
        from tinysh.exceptions import ConfigValidationError

        for data in (
            {'shell': {'verbose': 'yes'}},
            {'shell': {'colour': 'red'}},
            {'jobs': {}},
            {'search_path': {'directories': [1, 2]}},
        ):
            with self.subTest(data=data):
                path = self._write('c.json', json.dumps(data))
                with self.assertRaises(ConfigValidationError):
                    ConfigLoader().load(path)

    def test_missing_config_file(self):
        from tinysh.core.config_loader import ConfigLoader
        from tinysh.exceptions import ConfigValidationError

        with self.assertRaises(ConfigValidationError) as cm:
            ConfigLoader().load(os.path.join(self.tmp.name, 'nope.json'))
        self.assertEqual(cm.exception.error_code, 1101)

    def test_path_file(self):
        """One directory per line; blanks and surrounding spaces are dropped."""
        from tinysh.core.config_loader import ConfigLoader

        path = self._write('paths', "/usr/local/bin\n\n  /usr/bin  \n/bin")
        self.assertEqual(
            ConfigLoader().load_path_file(path),
            ['/usr/local/bin', '/usr/bin', '/bin']
        )

    def test_missing_path_file_falls_back(self):
        from tinysh.core.config_loader import ConfigLoader, Config

        config = Config()
        config.search_path.path_file = os.path.join(self.tmp.name, 'missing')
        ConfigLoader().apply_path_file(config)
        self.assertEqual(config.paths, [])

    def test_apply_path_file(self):
        from tinysh.core.config_loader import ConfigLoader, Config

        config = Config()
        config.search_path.path_file = self._write('paths', "/opt/tools\n")
        ConfigLoader().apply_path_file(config)
        self.assertEqual(config.paths, ['/opt/tools'])


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def test_logger_singleton(self):
        from tinysh.logger import Logger

        log1 = Logger('test1')
        log2 = Logger('test1')

        self.assertIs(log1, log2)  # Same subsystem = same instance
        self.assertEqual(log1.name, 'tinysh.test1')

    def test_log_levels(self):
        from tinysh.logger import LogLevel

        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertEqual(LogLevel.from_name('debug'), LogLevel.DEBUG)
        with self.assertRaises(ValueError):
            LogLevel.from_name('loud')

    def test_trace_level_follows_verbose(self):
        """Narration is INFO in verbose mode and DEBUG otherwise."""
        from tinysh.logger import get_logger, LogLevel

        log = get_logger('trace_test')
        with self.assertLogs('tinysh.trace_test', level='DEBUG') as cm:
            log.trace("loud", verbose=True)
            log.trace("quiet", verbose=False)

        self.assertEqual(cm.records[0].levelno, LogLevel.INFO)
        self.assertEqual(cm.records[1].levelno, LogLevel.DEBUG)
        self.assertEqual(cm.records[0].pid, os.getpid())

    def test_formatter(self):
        import logging
        from tinysh.logger import LogFormatter

        record = logging.LogRecord('tinysh.pipe', logging.ERROR, __file__, 1,
                                   'broken', None, None)
        record.subsystem = 'pipe'
        record.pid = 42
        record.context = {'fd': 4}
        text = LogFormatter(use_colors=False).format(record)

        self.assertIn('[pipe]', text)
        self.assertIn('(pid=42)', text)
        self.assertIn('broken', text)
        self.assertIn('{fd=4}', text)


class Replaced(Exception):
    """Stands in for a successful exec in mocked launcher tests."""


class TestLauncher(unittest.TestCase):
    """Test executable resolution."""

    def _config(self, directories=None, fallback=False):
        from tinysh.core.config_loader import Config

        config = Config()
        config.search_path.directories = list(directories or [])
        config.search_path.fallback = fallback
        return config

    def test_environment_mode_uses_execvp(self):
        from tinysh.process.launcher import Launcher

        with mock.patch('tinysh.process.launcher.os.execvp', side_effect=Replaced) as execvp:
            with self.assertRaises(Replaced):
                Launcher(self._config()).launch(['ls', '-la'])
        execvp.assert_called_once_with('ls', ['ls', '-la'])

    def test_environment_mode_not_found(self):
        from tinysh.process.launcher import Launcher
        from tinysh.exceptions import CommandNotFoundError

        error = FileNotFoundError(2, 'No such file or directory')
        with mock.patch('tinysh.process.launcher.os.execvp', side_effect=error):
            with self.assertRaises(CommandNotFoundError) as cm:
                Launcher(self._config()).launch(['nosuch'])
        self.assertEqual(cm.exception.program, 'nosuch')

    def test_other_exec_failure(self):
        from tinysh.process.launcher import Launcher
        from tinysh.exceptions import ExecError

        error = PermissionError(13, 'Permission denied')
        with mock.patch('tinysh.process.launcher.os.execvp', side_effect=error):
            with self.assertRaises(ExecError) as cm:
                Launcher(self._config()).launch(['script'])
        self.assertEqual(cm.exception.errno, 13)
        self.assertIn('Permission denied', cm.exception.message)

    def test_empty_argv(self):
        from tinysh.process.launcher import Launcher
        from tinysh.exceptions import ExecError

        with self.assertRaises(ExecError):
            Launcher(self._config()).launch([])

    def test_configured_path_first_directory_only(self):
        """Without fallback a miss in the first directory is final."""
        from tinysh.process.launcher import Launcher
        from tinysh.exceptions import CommandNotFoundError

        config = self._config(['/opt/a', '/opt/b'])
        error = FileNotFoundError(2, 'No such file or directory')
        with mock.patch('tinysh.process.launcher.os.execv', side_effect=error) as execv:
            with self.assertRaises(CommandNotFoundError) as cm:
                Launcher(config).launch(['prog', '-x'])

        execv.assert_called_once_with('/opt/a/prog', ['prog', '-x'])
        self.assertEqual(cm.exception.searched, ['/opt/a'])

    def test_configured_path_with_fallback(self):
        from tinysh.process.launcher import Launcher

        config = self._config(['/opt/a', '/opt/b'], fallback=True)
        error = FileNotFoundError(2, 'No such file or directory')
        with mock.patch('tinysh.process.launcher.os.execv', side_effect=[error, Replaced]) as execv:
            with self.assertRaises(Replaced):
                Launcher(config).launch(['prog'])

        self.assertEqual(
            [c.args[0] for c in execv.call_args_list],
            ['/opt/a/prog', '/opt/b/prog']
        )

    def test_configured_path_stops_on_hard_error(self):
        from tinysh.process.launcher import Launcher
        from tinysh.exceptions import ExecError

        config = self._config(['/opt/a', '/opt/b'], fallback=True)
        error = PermissionError(13, 'Permission denied')
        with mock.patch('tinysh.process.launcher.os.execv', side_effect=error) as execv:
            with self.assertRaises(ExecError):
                Launcher(config).launch(['prog'])
        execv.assert_called_once()

    def test_slash_names_are_not_searched(self):
        from tinysh.process.launcher import Launcher

        launcher = Launcher(self._config(['/opt/a']))
        self.assertEqual(launcher.candidates('./run.sh'), ['./run.sh'])
        self.assertEqual(launcher.candidates('run.sh'), ['/opt/a/run.sh'])

        with mock.patch('tinysh.process.launcher.os.execv', side_effect=Replaced) as execv:
            with self.assertRaises(Replaced):
                launcher.launch(['/bin/echo', 'hi'])
        execv.assert_called_once_with('/bin/echo', ['/bin/echo', 'hi'])


class TestDescriptorOrder(unittest.TestCase):
    """Test the order of descriptor operations with mocked system calls."""

    def setUp(self):
        from tinysh.core.config_loader import Config

        self.config = Config()

    def test_pipe_head_side(self):
        """Head: close read end, dup write end onto stdout, close write end, exec."""
        from tinysh.ipc import pipe

        calls = mock.MagicMock()
        with mock.patch('tinysh.ipc.descriptors.os') as fake_os, \
                mock.patch('tinysh.ipc.pipe.Launcher') as launcher_cls:
            calls.attach_mock(fake_os, 'os')
            calls.attach_mock(launcher_cls, 'Launcher')
            pipe._run_head(['a'], (10, 11), self.config)

        self.assertEqual(calls.mock_calls, [
            mock.call.os.close(10),
            mock.call.os.dup2(11, 1),
            mock.call.os.close(11),
            mock.call.Launcher(self.config),
            mock.call.Launcher().launch(['a']),
        ])

    def test_pipe_tail_side(self):
        """Tail: wait for head, dup read end onto stdin, close both ends."""
        from tinysh.ipc import pipe

        calls = mock.MagicMock()
        with mock.patch('tinysh.ipc.descriptors.os') as fake_os, \
                mock.patch('tinysh.ipc.pipe.os') as pipe_os:
            pipe_os.waitpid.return_value = (42, 0)
            calls.attach_mock(pipe_os.waitpid, 'waitpid')
            calls.attach_mock(fake_os, 'os')
            pipe._attach_to_head(42, (10, 11), self.config)

        self.assertEqual(calls.mock_calls, [
            mock.call.waitpid(42, 0),
            mock.call.os.dup2(10, 0),
            mock.call.os.close(10),
            mock.call.os.close(11),
        ])

    def test_pipe_wait_failure_closes_both_ends(self):
        from tinysh.ipc import pipe
        from tinysh.exceptions import WaitError

        with mock.patch('tinysh.ipc.descriptors.os') as fake_os, \
                mock.patch('tinysh.ipc.pipe.os') as pipe_os:
            pipe_os.waitpid.side_effect = ChildProcessError(10, 'No child processes')
            with self.assertRaises(WaitError):
                pipe._attach_to_head(42, (10, 11), self.config)

        fake_os.close.assert_has_calls([mock.call(10), mock.call(11)])
        fake_os.dup2.assert_not_called()

    def test_fork_failure_closes_pipe(self):
        from tinysh.ipc import pipe
        from tinysh.exceptions import SpawnError
        from tinysh.shell.parser import Stage

        with mock.patch('tinysh.ipc.descriptors.os') as fake_os, \
                mock.patch('tinysh.ipc.pipe.os') as pipe_os:
            fake_os.pipe.return_value = (10, 11)
            pipe_os.fork.side_effect = BlockingIOError(11, 'Resource temporarily unavailable')
            with self.assertRaises(SpawnError):
                pipe.handle_pipe(['a'], [Stage(['b'])], self.config)

        fake_os.close.assert_has_calls([mock.call(10), mock.call(11)])

    def test_redirect_overwrite(self):
        """Open with truncate, dup onto stdout, close the original, exec."""
        from tinysh.ipc import redirection
        from tinysh.ipc.redirection import RedirectMode, handle_redirect

        calls = mock.MagicMock()
        with mock.patch('tinysh.ipc.descriptors.os') as fake_os, \
                mock.patch('tinysh.ipc.redirection.Launcher') as launcher_cls:
            fake_os.open.return_value = 7
            calls.attach_mock(fake_os, 'os')
            calls.attach_mock(launcher_cls, 'Launcher')
            handle_redirect(['echo', 'hi'], ['out.txt'], RedirectMode.TRUNCATE, self.config)

        flags = os.O_CREAT | os.O_WRONLY | os.O_TRUNC
        self.assertEqual(calls.mock_calls, [
            mock.call.os.open('out.txt', flags, redirection.FILE_PERMISSIONS),
            mock.call.os.dup2(7, 1),
            mock.call.os.close(7),
            mock.call.Launcher(self.config),
            mock.call.Launcher().launch(['echo', 'hi']),
        ])

    def test_redirect_append_flags(self):
        from tinysh.ipc.redirection import RedirectMode
        from tinysh.shell.parser import FeatureType

        mode = RedirectMode.from_feature(FeatureType.APPEND)
        self.assertIs(mode, RedirectMode.APPEND)
        self.assertEqual(mode.flags, os.O_CREAT | os.O_WRONLY | os.O_APPEND)
        with self.assertRaises(ValueError):
            RedirectMode.from_feature(FeatureType.PIPE)

    def test_redirect_dup_failure_closes_file(self):
        from tinysh.ipc.redirection import RedirectMode, handle_redirect
        from tinysh.exceptions import DescriptorError

        with mock.patch('tinysh.ipc.descriptors.os') as fake_os, \
                mock.patch('tinysh.ipc.redirection.Launcher') as launcher_cls:
            fake_os.open.return_value = 7
            fake_os.dup2.side_effect = OSError(9, 'Bad file descriptor')
            with self.assertRaises(DescriptorError) as cm:
                handle_redirect(['echo'], ['out.txt'], RedirectMode.APPEND, self.config)

        self.assertEqual(cm.exception.operation, 'dup2')
        fake_os.close.assert_called_once_with(7)
        launcher_cls.assert_not_called()

    def test_redirect_open_failure(self):
        from tinysh.ipc.redirection import RedirectMode, handle_redirect
        from tinysh.exceptions import DescriptorError

        with mock.patch('tinysh.ipc.descriptors.os') as fake_os:
            fake_os.open.side_effect = PermissionError(13, 'Permission denied')
            with self.assertRaises(DescriptorError) as cm:
                handle_redirect(['echo'], ['/root/x'], RedirectMode.TRUNCATE, self.config)

        self.assertEqual(cm.exception.path, '/root/x')
        fake_os.dup2.assert_not_called()

    def test_router_dispatches_on_operator(self):
        from tinysh.ipc import router
        from tinysh.ipc.redirection import RedirectMode
        from tinysh.shell.parser import parse_stages

        with mock.patch('tinysh.ipc.router.handle_pipe', side_effect=Replaced) as handle_pipe:
            with self.assertRaises(Replaced):
                router.run_stages(parse_stages(['a', '|', 'b', '>', 'f']), self.config)
        head, tail, _ = handle_pipe.call_args.args
        self.assertEqual(head, ['a'])
        self.assertEqual([s.argv for s in tail], [['b'], ['f']])

        with mock.patch('tinysh.ipc.router.handle_redirect', side_effect=Replaced) as handle_redirect:
            with self.assertRaises(Replaced):
                router.run_stages(parse_stages(['b', '>>', 'f']), self.config)
        handle_redirect.assert_called_once_with(['b'], ['f'], RedirectMode.APPEND, self.config)

        with mock.patch('tinysh.ipc.router.Launcher') as launcher_cls:
            router.run_stages(parse_stages(['c']), self.config)
        launcher_cls.return_value.launch.assert_called_once_with(['c'])


class TestDispatcherSignals(unittest.TestCase):
    """Test the shell's signal dispositions around a foreground command."""

    def test_interrupts_ignored_from_fork(self):
        """SIGINT is already ignored when fork() runs, and restored afterwards."""
        from tinysh.core.config_loader import Config
        from tinysh.process.dispatcher import Dispatcher

        before = signal.getsignal(signal.SIGINT)
        seen = []

        def fake_fork():
            seen.append(signal.getsignal(signal.SIGINT))
            raise BlockingIOError(11, 'Resource temporarily unavailable')

        with mock.patch('tinysh.process.dispatcher.os.fork', side_effect=fake_fork):
            status = Dispatcher(Config()).dispatch(['ls'])

        self.assertFalse(status.ok)
        self.assertEqual(seen, [signal.SIG_IGN])
        self.assertEqual(signal.getsignal(signal.SIGINT), before)


class TestShell(unittest.TestCase):
    """Test the shell loop and built-ins without spawning processes."""

    def setUp(self):
        from tinysh.shell.shell import Shell

        self.cwd = os.getcwd()
        self.shell = Shell()

    def tearDown(self):
        os.chdir(self.cwd)

    def test_blank_line_does_not_spawn(self):
        with mock.patch('tinysh.process.dispatcher.os.fork') as fork:
            status = self.shell.execute_line("   \t  ")
        self.assertTrue(status.ok)
        fork.assert_not_called()

    def test_syntax_error_does_not_spawn(self):
        with mock.patch('tinysh.process.dispatcher.os.fork') as fork:
            status = self.shell.execute_line("| wc")
        self.assertFalse(status.ok)
        fork.assert_not_called()

    def test_cd_and_pwd(self):
        with tempfile.TemporaryDirectory() as tmp:
            status = self.shell.execute_line(f"cd {tmp}")
            self.assertTrue(status.ok)
            self.assertEqual(os.path.realpath(os.getcwd()), os.path.realpath(tmp))
            os.chdir(self.cwd)

    def test_cd_home(self):
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.dict(os.environ, {'HOME': tmp}):
                self.assertTrue(self.shell.execute_line("cd").ok)
            self.assertEqual(os.path.realpath(os.getcwd()), os.path.realpath(tmp))
            os.chdir(self.cwd)

    def test_cd_errors(self):
        self.assertFalse(self.shell.execute_line("cd a b").ok)
        self.assertFalse(self.shell.execute_line("cd /definitely/not/here").ok)
        with mock.patch.dict(os.environ, clear=True):
            self.assertFalse(self.shell.execute_line("cd").ok)

    def test_pwd_arguments(self):
        self.assertFalse(self.shell.execute_line("pwd -x").ok)

    def test_pwd_with_operator_goes_to_dispatcher(self):
        from tinysh.process.states import ExitStatus

        with mock.patch.object(self.shell.dispatcher, 'dispatch',
                               return_value=ExitStatus.success()) as dispatch:
            self.shell.execute_line("pwd > where.txt")
        dispatch.assert_called_once_with(['pwd', '>', 'where.txt'])

    def test_verbose_and_brief(self):
        self.shell.execute_line("verbose")
        self.assertTrue(self.shell.config.verbose)
        self.shell.execute_line("brief")
        self.assertFalse(self.shell.config.verbose)

    def test_exit(self):
        self.shell.execute_line("exit")
        self.assertTrue(self.shell.exiting)

    def test_run_until_exit(self):
        with mock.patch('builtins.input', side_effect=["", "exit", "not reached"]) as fake_input:
            self.assertEqual(self.shell.run(), 0)
        self.assertEqual(fake_input.call_count, 2)
        fake_input.assert_called_with("tinysh> ")

    def test_run_until_eof(self):
        with mock.patch('builtins.input', side_effect=EOFError):
            self.assertEqual(self.shell.run(), 0)

    def test_out_of_memory_is_fatal(self):
        with mock.patch('builtins.input', return_value="ls"), \
                mock.patch('tinysh.shell.shell.tokenize', side_effect=MemoryError):
            self.assertEqual(self.shell.run(), 1)

    def test_out_of_memory_while_reading(self):
        """Running out of memory inside input() ends the shell with status 1."""
        with mock.patch('builtins.input', side_effect=MemoryError), \
                self.assertLogs('tinysh.shell', level='CRITICAL'):
            self.assertEqual(self.shell.run(), 1)

    def test_exit_keeps_previous_status(self):
        """exit does not overwrite the status of the command before it."""
        from tinysh.process.states import ExitStatus

        with mock.patch.object(self.shell.dispatcher, 'dispatch',
                               return_value=ExitStatus.failure(127)):
            self.shell.execute_line("nosuch-command")
        self.shell.execute_line("exit")

        self.assertTrue(self.shell.last_status.command_not_found)

    def test_startup_names_search_path(self):
        """The path in use is announced even outside verbose mode."""
        import io

        with mock.patch('builtins.input', side_effect=EOFError), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            self.shell.run()
        self.assertIn("Using the path defined by your environment.", out.getvalue())

        self.shell.config.search_path.directories = ['/opt/bin']
        with mock.patch('builtins.input', side_effect=EOFError), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            self.shell.run()
        self.assertIn("Using the path defined in the provided path file.", out.getvalue())


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
