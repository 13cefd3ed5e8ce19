# app/services/openai_service.py
import logging
from typing import Optional, Dict, Any, List
from flask import Flask
from openai import OpenAI

class OpenAIService:
    """
    OpenAI API 연동을 담당하는 서비스 클래스.
    관측 노트 다듬기와 관측지 정보(웹 검색 인용 포함) 기능을 제공합니다.

    두 기능 모두 부가 기능이므로, 실패하더라도 일지 작성/조회 흐름을 막지 않습니다.
    - enhance_journal_entry: 실패 시 원본 텍스트를 그대로 반환
    - get_location_info: 실패 시 None 반환
    """

    def __init__(self, client: Optional[OpenAI] = None, model: str = 'gpt-4o-mini', search_model: str = 'gpt-4o-search-preview'):
        """
        실제 클라이언트는 init_app 메서드를 통해 설정됩니다. (테스트에서는 직접 전달)
        """
        self.client = client
        self.model = model
        self.search_model = search_model

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 클라이언트를 설정합니다.
        API 키가 없으면 AI 기능만 비활성화하고 앱은 정상적으로 시작합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.model = app.config.get('OPENAI_MODEL', self.model)
        self.search_model = app.config.get('OPENAI_SEARCH_MODEL', self.search_model)

        api_key = app.config.get('OPENAI_API_KEY')
        if not api_key:
            logging.warning("OpenAIService: OPENAI_API_KEY가 없어 AI 기능이 비활성화됩니다.")
            return

        self.client = OpenAI(api_key=api_key)
        logging.info("OpenAIService: OpenAI API 서비스가 성공적으로 초기화되었습니다.")

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    def enhance_journal_entry(self, text: str, target: str) -> str:
        """
        관측 노트를 천문 잡지 에디터의 문체로 다듬습니다.

        :param text: 사용자가 작성한 관측 노트
        :param target: 관측 대상
        :return: 다듬어진 노트. 실패하면 원본 텍스트
        """
        if not self.client:
            logging.warning("OpenAI API Key가 없어 원본 노트를 그대로 반환합니다.")
            return text

        prompt = self._build_enhance_prompt(text, target)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=600
            )
            enhanced = (response.choices[0].message.content or '').strip()
            return enhanced or text
        except Exception as e:
            logging.error(f"관측 노트 다듬기 실패: {e}", exc_info=True)
            return text

    def get_location_info(self, location: str, lat: Optional[float] = None, lng: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """
        관측지에 대한 천문학적/지리학적 정보와 관측 조건을 웹 검색 기반으로 생성합니다.

        :return: {"text": 설명, "links": [{"title", "uri"}, ...]} 또는 None
        """
        if not self.client:
            return None

        prompt = self._build_location_prompt(location, lat, lng)
        try:
            response = self.client.chat.completions.create(
                model=self.search_model,
                web_search_options={},
                messages=[{"role": "user", "content": prompt}]
            )
            message = response.choices[0].message
            return {
                "text": message.content or "No information available.",
                "links": self._extract_links(getattr(message, 'annotations', None) or [])
            }
        except Exception as e:
            logging.error(f"관측지 정보 생성 실패 (location: {location}): {e}", exc_info=True)
            return None

    def _build_enhance_prompt(self, text: str, target: str) -> str:
        return f"""
        당신은 천문학 전문가이자 고급 천문 잡지의 시적인 에디터입니다.
        아빠와 아들이 작성한 관측 노트를 바탕으로, 전문적이면서도 경이로움이 느껴지는 글로 다듬어주세요.
        한국어로 작성해야 합니다.

        관측 대상: {target}
        작성된 노트: "{text}"

        150단어 이내로 작성하고, 마크다운 서식 없이 줄글로 작성해주세요.
        """

    def _build_location_prompt(self, location: str, lat: Optional[float], lng: Optional[float]) -> str:
        prompt = f"""
        이 장소({location})에 대한 흥미로운 천문학적 또는 지리학적 사실을 한국어로 알려주세요.
        별을 사랑하는 사람들에게 영감을 줄 수 있도록 간결하고 시적인 어조로 한국어로 작성해주세요.
        """
        if lat is not None and lng is not None:
            prompt += f"\n좌표({lat}, {lng})를 기준으로 천체 관측을 위한 관측 조건(광공해, 고도 등)을 정확하게 분석해주세요."
        return prompt

    @staticmethod
    def _extract_links(annotations) -> List[Dict[str, str]]:
        """url_citation 주석에서 출처 링크를 뽑아 URI 기준으로 중복을 제거합니다 (첫 등장 순서 유지)."""
        links = []
        seen = set()
        for annotation in annotations:
            if getattr(annotation, 'type', None) != 'url_citation':
                continue
            citation = annotation.url_citation
            if not citation.url or citation.url in seen:
                continue
            seen.add(citation.url)
            links.append({"title": citation.title or "Web Source", "uri": citation.url})
        return links
