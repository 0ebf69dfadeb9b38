"""근태 코어 패키지 — I/O 없는 순수 도메인 로직.

Attendance core package — Pure domain logic with no I/O.

Modules:
    enums: 상태/동작/필드 열거형 (State, action, field and status enums)
    business_day: 영업일 계산 (Business-day resolution, 04:00 boundary)
    state_machine: 근태 상태 전이 테이블 (Attendance transition table)
    reconciler: 지난 영업일 상태 초기화 판단 (Stale-state reconciliation)
    errors: 도메인 오류 결과 타입 (Domain error result types)
"""
