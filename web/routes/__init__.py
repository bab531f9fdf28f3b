"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계정과목
- journals: 전표 전기 / 조회 / 무효화
- expenses: 비용 전기
- ledger: 계정 원장, 시산표
- tax: GST / TDS 요약, TDS 거래 기록
"""
