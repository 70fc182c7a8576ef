import io

import openpyxl
import pytest

from db.models import Account, ImportBatch, TrafficRecord
from import_engine import ImportFileError, ImportStore, run_import
from tests.factories import AccountFactory, ProjectFactory

HEADER = "账号,平台,标题,阅读,点赞,发布时间"


def _csv(*lines, encoding="utf-8") -> bytes:
    return ("\n".join(lines) + "\n").encode(encoding)


def test_two_rows_same_new_account(session):
    content = _csv(
        HEADER,
        "小王,抖音,视频一,1200,30,2024-03-01 10:00",
        "小王,抖音,视频二,--,5,",
    )
    result = run_import(ImportStore(session), content, file_name="traffic.csv", user_id=3)

    assert (result.total_rows, result.success_rows, result.failed_rows) == (2, 2, 0)
    assert result.errors == []
    assert session.query(Account).count() == 1

    records = session.query(TrafficRecord).order_by(TrafficRecord.id).all()
    assert len(records) == 2
    assert {r.import_batch for r in records} == {result.batch_no}
    assert records[0].views == 1200
    assert records[0].publish_date.isoformat() == "2024-03-01"
    assert records[1].views == 0
    assert records[1].publish_date is None
    assert records[1].published_at is None
    assert records[1].recommends is None

    batch = session.query(ImportBatch).one()
    assert batch.batch_no == result.batch_no
    assert (batch.total_rows, batch.success_rows, batch.failed_rows) == (2, 2, 0)
    assert batch.file_name == "traffic.csv"
    assert batch.created_by == 3
    assert batch.status == "completed"
    assert batch.error_log is None


def test_unknown_platform_row_fails_alone(session):
    content = _csv(
        HEADER,
        "小王,抖音,视频一,100,1,2024-03-01",
        "小李,未知平台,视频二,200,2,2024-03-02",
        "小张,快手,视频三,300,3,2024-03-03",
    )
    result = run_import(ImportStore(session), content)

    assert (result.total_rows, result.success_rows, result.failed_rows) == (3, 2, 1)
    assert len(result.errors) == 1
    assert "row 3" in result.errors[0]
    assert "未知平台" in result.errors[0]
    titles = {t for (t,) in session.query(TrafficRecord.content_title)}
    assert titles == {"视频一", "视频三"}
    assert session.query(Account).filter_by(account_name="小李").count() == 0


def test_counts_ignore_blank_lines(session):
    content = _csv(HEADER, "", "a,抖音,t,1,1,", "   ", "b,bogus,t,1,1,", "")
    result = run_import(ImportStore(session), content)
    assert result.total_rows == 2
    assert result.success_rows + result.failed_rows == result.total_rows
    assert result.errors == ["row 5: unrecognized platform: bogus"]


def test_unicode_line_separator_inside_title(session):
    content = _csv(HEADER, "小王,抖音,上集\u2028下集,100,1,2024-03-01")
    result = run_import(ImportStore(session), content)

    assert (result.total_rows, result.success_rows, result.failed_rows) == (1, 1, 0)
    assert session.query(TrafficRecord).one().content_title == "上集\u2028下集"


def test_time_only_publish_cell_leaves_date_unset(session):
    content = _csv(HEADER, "小王,抖音,t,1,1,10:30")
    result = run_import(ImportStore(session), content)

    assert result.success_rows == 1
    record = session.query(TrafficRecord).one()
    assert record.publish_date is None
    assert record.published_at is None


def test_missing_platform_column_fails_every_row(session):
    content = _csv("账号,标题,阅读", "小王,t1,1", "小李,t2,2")
    result = run_import(ImportStore(session), content)

    assert (result.success_rows, result.failed_rows) == (0, 2)
    assert result.errors[0] == "row 2: no column for platform"
    assert session.query(ImportBatch).count() == 1
    assert session.query(TrafficRecord).count() == 0


def test_short_rows_tolerated(session):
    content = _csv(HEADER, "小王,抖音")
    result = run_import(ImportStore(session), content)
    assert result.success_rows == 1
    rec = session.query(TrafficRecord).one()
    assert rec.content_title is None
    assert rec.views == 0 and rec.likes == 0


def test_error_lists_are_truncated(session):
    lines = [HEADER] + [f"acc{i},nowhere,t,1,1," for i in range(120)]
    result = run_import(ImportStore(session), _csv(*lines))

    assert result.failed_rows == 120
    assert len(result.errors) == 120
    assert len(result.to_dict()["errors"]) == 10
    batch = session.query(ImportBatch).one()
    assert len(batch.error_log.splitlines()) == 100


def test_created_accounts_belong_to_project(session):
    project = ProjectFactory()
    run_import(ImportStore(session), _csv(HEADER, "小王,小红书,t,1,1,"), project_id=project.id)
    assert session.query(Account).one().project_id == project.id


def test_storage_failure_only_skips_that_row(session):
    # project 9999 does not exist: creating a new account violates the
    # foreign key, while rows for an existing account still go through
    AccountFactory(platform="douyin", account_name="老号")
    content = _csv(HEADER, "老号,抖音,t1,1,1,", "新号,抖音,t2,1,1,", "老号,抖音,t3,1,1,")
    result = run_import(ImportStore(session), content, project_id=9999)

    assert (result.success_rows, result.failed_rows) == (2, 1)
    assert result.errors[0].startswith("row 3: unexpected:")
    assert result.accounts_created == 0
    assert session.query(Account).count() == 1
    assert session.query(TrafficRecord).count() == 2
    assert session.query(ImportBatch).count() == 1


def test_full_metric_set(session):
    content = _csv(
        "账号名称,平台,作品名称,内容类型,作品链接,发布时间,播放量,点赞,评论,分享,收藏,推荐,完播率,备注",
        '小王,抖音,"标题,带逗号",视频,https://example.com/v/1,2024-03-01 08:00,5000,50,5,3,7,--,35%,主号',
    )
    run_import(ImportStore(session), content)
    rec = session.query(TrafficRecord).one()
    assert rec.content_title == "标题,带逗号"
    assert rec.content_type == "视频"
    assert rec.content_url == "https://example.com/v/1"
    assert (rec.views, rec.likes, rec.comments, rec.shares, rec.saves) == (5000, 50, 5, 3, 7)
    assert rec.recommends is None
    assert rec.completion_rate == 35.0
    assert rec.account.remark == "主号"


def test_gbk_file(session):
    content = _csv(HEADER, "小王,抖音,视频一,10,1,2024-03-01", encoding="gbk")
    result = run_import(ImportStore(session), content)
    assert result.success_rows == 1
    assert session.query(Account).one().account_name == "小王"


def test_xlsx_file(session):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["账号", "平台", "标题", "阅读", "点赞", "发布时间"])
    ws.append(["小王", "抖音", "视频一", 1200, 30, "2024-03-01"])
    ws.append(["小王", "抖音", "视频二", 800, 10, "2024-03-02"])
    buf = io.BytesIO()
    wb.save(buf)

    result = run_import(ImportStore(session), buf.getvalue(), file_name="traffic.xlsx")
    assert (result.total_rows, result.success_rows) == (2, 2)
    assert sum(v for (v,) in session.query(TrafficRecord.views)) == 2000


def test_reimport_duplicates_records_not_accounts(session):
    content = _csv(HEADER, "小王,抖音,视频一,100,1,2024-03-01")
    run_import(ImportStore(session), content)
    run_import(ImportStore(session), content)

    assert session.query(Account).count() == 1
    assert session.query(TrafficRecord).count() == 2
    assert session.query(ImportBatch).count() == 2


def test_empty_file_rejected_without_batch(session):
    with pytest.raises(ImportFileError):
        run_import(ImportStore(session), b"")
    assert session.query(ImportBatch).count() == 0


def test_header_only_file_writes_empty_batch(session):
    result = run_import(ImportStore(session), _csv(HEADER))
    assert result.total_rows == 0
    assert session.query(ImportBatch).one().total_rows == 0


def test_fixed_account_ignores_account_columns(session):
    acc = AccountFactory(account_name="小王", platform="douyin")
    content = _csv(
        "账号,平台,标题,播放量",
        "别人,未知平台,t1,10",
        ",,t2,20",
    )
    result = run_import(ImportStore(session), content, account_id=acc.id)

    assert (result.total_rows, result.success_rows, result.failed_rows) == (2, 2, 0)
    assert result.accounts_created == 0
    assert session.query(Account).count() == 1
    assert {r.account_id for r in session.query(TrafficRecord)} == {acc.id}


def test_fixed_account_without_account_columns(session):
    acc = AccountFactory()
    result = run_import(ImportStore(session), _csv("标题,播放", "t1,5"), account_id=acc.id)
    assert result.success_rows == 1
    assert session.query(TrafficRecord).one().views == 5
