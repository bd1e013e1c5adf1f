def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return float(value) if value is not None else None


def book_to_dict(b):
    return {
        "id": b.id,
        "branch_id": b.branch_id,
        "title": b.title,
        "total_copies": b.total_copies,
        "available_copies": b.available_copies,
        "status": b.status.value,
    }


def fine_to_dict(f):
    return {
        "id": f.id,
        "loan_id": f.loan_id,
        "days_overdue": f.days_overdue,
        "daily_rate": _money(f.daily_rate),
        "fine_amount": _money(f.fine_amount),
        "paid_amount": _money(f.paid_amount),
        "payment_status": f.payment_status.value,
        "payment_method": f.payment_method,
        "payment_date": _iso(f.payment_date),
        "waived": bool(f.waived),
        "waived_by": f.waived_by,
        "waived_reason": f.waived_reason,
        "created_at": _iso(f.created_at),
    }


def loan_to_dict(x):
    return {
        "id": x.id,
        "book_id": x.book_id,
        "book_title": x.book.title if x.book else None,
        "borrower_type": x.borrower_type.value,
        "student_id": x.student_id,
        "teacher_id": x.teacher_id,
        "issue_date": _iso(x.issue_date),
        "due_date": _iso(x.due_date),
        "return_date": _iso(x.return_date),
        "status": x.status.value,
        "renewed_count": x.renewed_count,
        "issued_by": x.issued_by,
        "returned_to": x.returned_to,
        "notes": x.notes,
        "fine": fine_to_dict(x.fine) if x.fine else None,
    }


def many(serializer):
    return lambda rows: [serializer(r) for r in rows]
