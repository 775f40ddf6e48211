import io
import json

from bugreporter.logging import StructuredLogger, configure_logging, get_logger


def test_structured_logger_json_format(capsys):
    """Test that structured logger produces JSON output when configured."""
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.log_work_item_created(9, 'Bug', param1='value1', param2=42)

    captured = capsys.readouterr()
    log_lines = [line for line in captured.out.strip().split('\n') if line]

    assert len(log_lines) == 1
    log_data = json.loads(log_lines[0])

    assert log_data['level'] == 'INFO'
    assert log_data['operation'] == 'bug_create'
    assert log_data['param1'] == 'value1'
    assert log_data['param2'] == 42
    assert 'timestamp' in log_data


def test_structured_logger_regular_format(capsys):
    """Test that structured logger produces regular text output when JSON disabled."""
    logger = StructuredLogger(name='test', json_logging=False, level='DEBUG')
    logger.debug('Resolved reference', param1='value1')

    captured = capsys.readouterr()
    assert 'Resolved reference' in captured.out
    assert 'DEBUG' in captured.out


def test_explicit_stream_receives_entries(capsys):
    stream = io.StringIO()
    logger = StructuredLogger(name='test', json_logging=True, stream=stream)
    logger.log_work_item_created(3)

    assert json.loads(stream.getvalue())['work_item_id'] == 3
    assert capsys.readouterr().out == ''


def test_work_item_created_entry(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.log_work_item_created(123, 'Bug', project='Shop')

    log_data = json.loads(capsys.readouterr().out.strip())

    assert log_data['message'] == 'Bug created successfully in Azure DevOps with ID: 123'
    assert log_data['operation'] == 'bug_create'
    assert log_data['work_item_id'] == 123
    assert log_data['work_item_type'] == 'Bug'
    assert log_data['project'] == 'Shop'


def test_work_item_created_text_format(capsys):
    logger = StructuredLogger(name='test', json_logging=False, level='INFO')
    logger.log_work_item_created(7)
    assert 'Bug created successfully in Azure DevOps with ID: 7' in capsys.readouterr().out


def test_log_error_includes_error_field(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.log_error('create failed', error='Invalid field', category='remote')

    log_data = json.loads(capsys.readouterr().out.strip())
    assert log_data['level'] == 'ERROR'
    assert log_data['error'] == 'Invalid field'
    assert log_data['category'] == 'remote'


def test_level_filters_debug(capsys):
    logger = StructuredLogger(name='test', json_logging=True, level='INFO')
    logger.debug('hidden')
    assert capsys.readouterr().out == ''


def test_handlers_are_not_duplicated(capsys):
    StructuredLogger(name='test', json_logging=True)
    logger = StructuredLogger(name='test', json_logging=True)
    logger.log_error('once')
    assert len(capsys.readouterr().out.strip().splitlines()) == 1


def test_configure_logging_replaces_global():
    first = configure_logging(json_logging=True, level='DEBUG')
    assert get_logger() is first
    assert first.json_logging is True
    second = configure_logging()
    assert get_logger() is second
    assert second is not first
