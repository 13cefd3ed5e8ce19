# app/data/astronomical_events.py
"""
2025년 주요 천문 현상. 모든 사용자에게 공통으로 보이는 읽기 전용 일정입니다.
"""

ASTRONOMICAL_EVENTS_2025 = [
    {
        'date': '2025-01-03',
        'title': '사분의자리 유성우 극대',
        'description': '새해 첫 유성우입니다. 시간당 최대 120개의 유성을 볼 수 있습니다. 달이 지고 난 새벽 시간이 관측하기 좋습니다.',
        'time': '새벽',
        'type': 'meteor',
    },
    {
        'date': '2025-01-14',
        'title': '화성 충',
        'description': '화성이 태양의 정반대 편에 위치하여 지구와 가장 가까워집니다. 밤새도록 붉고 밝게 빛나는 화성을 관측할 절호의 기회입니다.',
        'type': 'planet',
    },
    {
        'date': '2025-03-14',
        'title': '개기월식',
        'description': '달이 지구의 그림자에 완전히 가려져 붉게 변하는 블러드 문을 볼 수 있습니다. 한국 전역에서 관측 가능합니다.',
        'time': '15:55 ~ 17:00 (KST 기준 확인 필요)',
        'type': 'eclipse',
    },
    {
        'date': '2025-03-20',
        'title': '춘분',
        'description': '낮과 밤의 길이가 같아지는 날입니다. 본격적인 봄철 관측 시즌의 시작을 알립니다.',
        'type': 'other',
    },
    {
        'date': '2025-04-22',
        'title': '거문고자리 유성우',
        'description': '시간당 약 20개의 유성이 떨어집니다. 밝은 유성이 많아 관측하는 재미가 있습니다.',
        'type': 'meteor',
    },
    {
        'date': '2025-05-06',
        'title': '물병자리 에타 유성우',
        'description': '핼리 혜성이 남기고 간 부스러기들입니다. 남반구에서 더 잘 보이지만 북반구에서도 새벽녘에 관측 가능합니다.',
        'type': 'meteor',
    },
    {
        'date': '2025-06-21',
        'title': '하지',
        'description': '북반구에서 낮이 가장 긴 날입니다. 밤이 짧아 관측 시간은 부족하지만 여름철 은하수를 보기 시작하기 좋은 시기입니다.',
        'type': 'other',
    },
    {
        'date': '2025-08-12',
        'title': '페르세우스자리 유성우',
        'description': '3대 유성우 중 하나입니다. 여름 밤하늘을 수놓는 화려한 불꽃놀이를 기대하세요. 시간당 최대 100개 관측 가능.',
        'type': 'meteor',
    },
    {
        'date': '2025-09-08',
        'title': '개기월식',
        'description': '올해 두 번째 개기월식입니다.',
        'type': 'eclipse',
    },
    {
        'date': '2025-09-21',
        'title': '토성 충',
        'description': '토성이 지구와 가장 가까워집니다. 소형 망원경으로도 토성의 고리를 선명하게 볼 수 있는 가장 좋은 시기입니다.',
        'type': 'planet',
    },
    {
        'date': '2025-10-21',
        'title': '오리온자리 유성우',
        'description': '오리온자리 근처에서 방사되는 유성우입니다. 시간당 약 20개 정도 예상됩니다.',
        'type': 'meteor',
    },
    {
        'date': '2025-11-17',
        'title': '사자자리 유성우',
        'description': '과거에 유성 폭풍을 일으켰던 유명한 유성우입니다. 평년 수준이지만 밝은 화구(Fireball)를 기대해볼 만합니다.',
        'type': 'meteor',
    },
    {
        'date': '2025-12-14',
        'title': '쌍둥이자리 유성우',
        'description': '일 년 중 가장 화려한 유성우입니다. 춥지만 맑은 겨울 하늘에서 시간당 120개 이상의 유성을 볼 수 있습니다.',
        'type': 'meteor',
    },
]
