# apps/bookingapp/tests/factories.py
import datetime
import uuid

import factory
from django.utils import timezone
from factory.django import DjangoModelFactory

from apps.bookingapp.models import Appointment, AppointmentStatus
from apps.customersapp.tests.factories import CustomerFactory
from apps.professionalsapp.tests.factories import ProfessionalFactory
from apps.serviceapp.tests.factories import ItemFactory


class AppointmentFactory(DjangoModelFactory):
    class Meta:
        model = Appointment

    id = factory.LazyFunction(uuid.uuid4)
    professional = factory.SubFactory(ProfessionalFactory)
    subsidiary = factory.SelfAttribute("professional.subsidiary")
    customer = factory.SubFactory(CustomerFactory)
    item = factory.SubFactory(ItemFactory, subsidiary=factory.SelfAttribute("..subsidiary"))
    start_time = factory.LazyFunction(lambda: timezone.now() + datetime.timedelta(days=1))
    end_time = factory.LazyAttribute(lambda o: o.start_time + datetime.timedelta(minutes=30))
    status = AppointmentStatus.NOT_CONFIRMED
